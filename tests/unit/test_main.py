# Path: tests/unit/test_main.py
"""
Unit Tests for the Command Line Entry Point

Logging setup is patched out; extraction runs against real temp files
except where the SSH path is exercised.
"""

import errno
import io
from contextlib import nullcontext
from pathlib import Path
from unittest.mock import MagicMock, patch

import paramiko
import pytest

from ban_extractor.constants import FileFormat
from ban_extractor.extractor import ExtractionResult
from ban_extractor.loaders.ssh_source import SFTPStream
from ban_extractor.main import build_parser, main
from ban_extractor.models.error import InputUnavailableError


@pytest.fixture
def initialized(mock_config):
    """Skip logging setup and hand the mock config to main()."""
    with patch('ban_extractor.main.initialize_system', return_value=mock_config):
        yield mock_config


class TestParser:
    """Test argument parsing."""

    def test_minimal_arguments(self):
        args = build_parser().parse_args(['-b', '1002', '-i', 'bills.xml'])

        assert args.ban == '1002'
        assert args.input == 'bills.xml'
        assert args.output is None
        assert args.format == 'XML'
        assert args.server is None

    def test_ssh_arguments(self):
        args = build_parser().parse_args([
            '-b', '1', '-i', '/data/x.gz', '-s', 'host', '-p', '2222',
            '-u', 'ec2-user', '-k', 'id_rsa', '-P', 'phrase'
        ])

        assert args.port == 2222
        assert args.user == 'ec2-user'
        assert args.key_file == 'id_rsa'
        assert args.password == 'phrase'

    def test_ban_required(self):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(['-i', 'bills.xml'])
        assert exc_info.value.code == 2

    def test_help_shows_examples(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['-h'])

        assert 'public key authentication' in capsys.readouterr().out


class TestValidation:
    """Test option checks done by main()."""

    def test_unknown_format(self, initialized, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(['-b', '1', '-i', 'bills.xml', '-f', 'RAR'])

        assert exc_info.value.code == 2
        assert 'XML ZIP GZIP' in capsys.readouterr().err

    def test_server_requires_user(self, initialized):
        with pytest.raises(SystemExit):
            main(['-b', '1', '-i', 'bills.xml', '-s', 'host', '-P', 'pw'])

    def test_server_requires_credentials(self, initialized):
        with pytest.raises(SystemExit):
            main(['-b', '1', '-i', 'bills.xml', '-s', 'host', '-u', 'me'])


class TestRun:
    """Test complete runs through main()."""

    def test_found(self, initialized, extract_file, capsys):
        code = main(['-b', '1002', '-i', str(extract_file)])

        output = extract_file.parent / 'bills.1002.xml'
        assert code == 0
        assert output.exists()

        printed = capsys.readouterr().out
        assert 'BAN EXTRACTOR' in printed
        assert '1002' in printed
        assert '[OK]' in printed

    def test_format_case_insensitive(self, initialized, extract_file):
        code = main(['-b', '1001', '-i', str(extract_file), '-f', 'gzip', '-q'])

        assert code == 0
        assert (extract_file.parent / 'bills.1001.xml.gz').exists()

    def test_not_found(self, initialized, extract_file, capsys):
        code = main(['-b', '4040', '-i', str(extract_file)])

        assert code == 1
        assert not (extract_file.parent / 'bills.4040.xml').exists()
        assert '[FAIL]' in capsys.readouterr().out

    def test_quiet_prints_nothing(self, initialized, extract_file, capsys):
        main(['-b', '1002', '-i', str(extract_file), '-q'])

        assert capsys.readouterr().out == ''

    def test_missing_input(self, initialized, temp_dir, capsys):
        code = main(['-b', '1', '-i', str(temp_dir / 'absent.xml')])

        assert code == 1
        assert 'File not found' in capsys.readouterr().out

    def test_ssh_run(self, initialized, temp_dir):
        result = ExtractionResult(found=True, identifier='1', output_path=temp_dir / 'x.xml')

        with patch('ban_extractor.main.Extractor') as extractor_class:
            extractor_class.return_value.run_ssh.return_value = result
            code = main([
                '-b', '1', '-i', '/data/x.gz', '-s', 'host',
                '-u', 'me', '-k', 'id_rsa', '-f', 'zip', '-q'
            ])

        assert code == 0
        assert extractor_class.call_args.kwargs['file_format'] is FileFormat.ZIP
        extractor_class.return_value.run_ssh.assert_called_once_with(
            host='host', username='me', port=None, password=None, key_file=Path('id_rsa')
        )
        extractor_class.return_value.run_local.assert_not_called()

    def test_interrupted(self, initialized):
        with patch('ban_extractor.main.Extractor') as extractor_class:
            extractor_class.return_value.run_local.side_effect = KeyboardInterrupt
            code = main(['-b', '1', '-i', 'bills.xml', '-q'])

        assert code == 130

    def test_extraction_error(self, initialized):
        with patch('ban_extractor.main.Extractor') as extractor_class:
            extractor_class.return_value.run_local.side_effect = InputUnavailableError('boom')
            code = main(['-b', '1', '-i', 'bills.xml', '-q'])

        assert code == 1


class BrokenStream(io.RawIOBase):
    """Stream that serves some bytes, then fails with the given error."""

    def __init__(self, data, error):
        super().__init__()
        self._data = data
        self._error = error

    def readable(self):
        return True

    def readinto(self, buffer):
        if not self._data:
            raise self._error
        size = min(len(buffer), len(self._data))
        buffer[:size] = self._data[:size]
        self._data = self._data[size:]
        return size


class FullSink(io.RawIOBase):
    """Sink of a disk that has run out of space."""

    def writable(self):
        return True

    def write(self, data):
        raise OSError(errno.ENOSPC, 'No space left on device')


class TestIOFailures:
    """Test that I/O failures end in [FAIL] and exit code 1, never a traceback."""

    @pytest.mark.parametrize('data', [b'', b'<Extract><Bill>'])
    def test_local_read_failure(self, initialized, temp_dir, capsys, data):
        input_path = temp_dir / 'bills.xml'
        stream = BrokenStream(data, OSError(errno.EIO, 'Input/output error'))

        with patch('ban_extractor.extractor.open_local_source', return_value=nullcontext(stream)):
            code = main(['-b', '1', '-i', str(input_path)])

        assert code == 1
        assert '[FAIL]' in capsys.readouterr().out
        assert not (temp_dir / 'bills.1.xml').exists()

    def test_sftp_transfer_failure(self, initialized, temp_dir, capsys):
        remote = MagicMock()
        remote.read.side_effect = paramiko.SSHException('Server connection dropped')
        stream = SFTPStream(remote, 'host:/data/x.gz')

        with patch('ban_extractor.extractor.SSHSource') as source_class:
            ssh = source_class.return_value.__enter__.return_value
            ssh.open.return_value = nullcontext(stream)
            code = main([
                '-b', '1', '-i', '/data/x.gz', '-o', str(temp_dir),
                '-s', 'host', '-u', 'me', '-P', 'pw'
            ])

        assert code == 1
        assert 'SFTP transfer failed' in capsys.readouterr().out

    def test_output_write_failure(self, initialized, extract_file, capsys):
        with patch('ban_extractor.extractor.open_destination', return_value=nullcontext(FullSink())):
            code = main(['-b', '1002', '-i', str(extract_file)])

        assert code == 1
        assert 'Cannot write output file' in capsys.readouterr().out

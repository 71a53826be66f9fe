# Path: ban_extractor/loaders/ssh_source.py
"""
SSH/SFTP Source

Streams an input extract from a remote server over SFTP.

Features:
- Password or private key authentication (key passphrase optional)
- Connection retry with exponential backoff (authentication is never retried)
- Connect timeout
- Secrets masked in logs
"""

import io
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

import paramiko
from tenacity import (
    Retrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config_loader import ConfigLoader
from ..constants import DEFAULT_SSH_PORT, DEFAULT_SSH_TIMEOUT, DEFAULT_SSH_MAX_RETRIES
from ..core.logger import get_input_logger
from ..models.error import InputUnavailableError


logger = get_input_logger('ssh_source')


def mask_secret(secret: Optional[str]) -> str:
    """
    Mask a password for logging, keeping only first and last character.

    Example:
        mask_secret('hunter2')  # 'h...2'
    """
    if not secret:
        return ''
    if len(secret) < 3:
        return '*' * len(secret)
    return f'{secret[0]}...{secret[-1]}'


class SFTPStream(io.RawIOBase):
    """
    Sequential reader over an open SFTP file.

    paramiko reports a dropped channel as SSHException, which is not an
    OSError; reads map it to InputUnavailableError. Closing the stream
    leaves the SFTP file to its owner.
    """

    def __init__(self, remote, source: str):
        super().__init__()
        self._remote = remote
        self._source = source

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        try:
            data = self._remote.read(len(buffer))
        except paramiko.SSHException as e:
            raise InputUnavailableError(f"SFTP transfer failed: {e}", source=self._source) from e
        size = len(data)
        buffer[:size] = data
        return size


class SSHSource:
    """
    SFTP input source.

    Use as a context manager; the SSH session is closed on exit.

    Example:
        with SSHSource('billing01', 'ec2-user', key_file=Path('id_rsa')) as ssh:
            with ssh.open('/data/extracts/MOBILITY/0202/bill.xml.gz') as stream:
                head = stream.read(3)
    """

    def __init__(
        self,
        host: str,
        username: str,
        port: Optional[int] = None,
        password: Optional[str] = None,
        key_file: Optional[Union[str, Path]] = None,
        config: Optional[ConfigLoader] = None
    ):
        """
        Initialize SSH source.

        Args:
            host: SSH server name
            username: Login user
            port: SSH port (configured default when None)
            password: Login password, or key passphrase when key_file is set
            key_file: Private key for public key authentication
            config: Optional ConfigLoader instance
        """
        self.config = config if config else ConfigLoader()
        self.host = host
        self.username = username
        self.port = port if port else self.config.get('ssh_port', DEFAULT_SSH_PORT)
        self.password = password or None
        self.key_file = Path(key_file) if key_file else None

        self.timeout = self.config.get('ssh_timeout', DEFAULT_SSH_TIMEOUT)
        self.max_retries = self.config.get('ssh_max_retries', DEFAULT_SSH_MAX_RETRIES)
        self.retry_wait = wait_exponential(multiplier=1, min=2, max=10)

        self._client: Optional[paramiko.SSHClient] = None

    def __enter__(self) -> 'SSHSource':
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def connect(self) -> None:
        """
        Establish and authenticate the SSH session.

        Raises:
            InputUnavailableError: If the server is unreachable after all
                retries, or authentication fails
        """
        logger.info(
            f"Parsing XML file on SSH server. Server name={self.host}, "
            f"port={self.port}, login={self.username}"
        )

        if self.key_file is not None:
            if not self.key_file.is_file():
                raise InputUnavailableError("Key file not found", source=str(self.key_file))
            logger.info(
                f"Try to connect using public key file authentication, key file name={self.key_file}"
            )
        else:
            logger.info(
                f"Try to connect using password authentication, password={mask_secret(self.password)}"
            )

        retrying = Retrying(
            stop=stop_after_attempt(max(self.max_retries, 1)),
            wait=self.retry_wait,
            retry=(
                retry_if_exception_type((OSError, paramiko.SSHException))
                & retry_if_not_exception_type(paramiko.AuthenticationException)
            ),
            reraise=True
        )

        try:
            for attempt in retrying:
                with attempt:
                    self._client = self._open_client()
        except paramiko.PasswordRequiredException as e:
            raise InputUnavailableError(
                f"SSH connection haven't established, private key is encrypted "
                f"and no passphrase given: {e}",
                source=self.host
            ) from e
        except paramiko.AuthenticationException as e:
            raise InputUnavailableError(
                f"SSH connection haven't established, the authentication failed: {e}",
                source=self.host
            ) from e
        except (OSError, paramiko.SSHException) as e:
            raise InputUnavailableError(
                f"SSH connection haven't established: {e}",
                source=f"{self.host}:{self.port}"
            ) from e

        logger.info("Authentication completed")

    def _open_client(self) -> paramiko.SSHClient:
        client = paramiko.SSHClient()
        client.load_system_host_keys()
        client.set_missing_host_key_policy(paramiko.WarningPolicy())

        try:
            if self.key_file is not None:
                client.connect(
                    self.host,
                    port=self.port,
                    username=self.username,
                    key_filename=str(self.key_file),
                    passphrase=self.password,
                    timeout=self.timeout,
                    allow_agent=False,
                    look_for_keys=False,
                )
            else:
                client.connect(
                    self.host,
                    port=self.port,
                    username=self.username,
                    password=self.password,
                    timeout=self.timeout,
                    allow_agent=False,
                    look_for_keys=False,
                )
        except Exception:
            client.close()
            raise

        return client

    @contextmanager
    def open(self, remote_path: str) -> Iterator[BinaryIO]:
        """
        Open a remote file for sequential binary reading.

        Args:
            remote_path: Path of the file on the SSH server

        Yields:
            Binary stream positioned at offset 0

        Raises:
            InputUnavailableError: If not connected, or the SFTP channel
                or the remote file cannot be opened
        """
        if self._client is None:
            raise InputUnavailableError("SSH session is not connected", source=self.host)

        try:
            sftp = self._client.open_sftp()
        except (OSError, paramiko.SSHException) as e:
            raise InputUnavailableError(f"Cannot open SFTP channel: {e}", source=self.host) from e

        try:
            try:
                remote = sftp.open(remote_path, 'rb')
            except OSError as e:
                raise InputUnavailableError(
                    f"Remote file not available: {e}",
                    source=f"{self.host}:{remote_path}"
                ) from e

            with remote:
                yield SFTPStream(remote, f"{self.host}:{remote_path}")
        finally:
            sftp.close()

    def close(self) -> None:
        """Close the SSH session if open."""
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.debug(f"SSH session to {self.host} closed")


__all__ = ['SFTPStream', 'SSHSource', 'mask_secret']

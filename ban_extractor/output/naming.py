# Path: ban_extractor/output/naming.py
"""
Output File Naming

Derives output and archive entry names from the input name and the BAN.

Rules:
- '<input>.gz' or '<input>.xml' loses that one extension
- '.<BAN>.xml' is appended
- the output format extension ('.zip', '.gz' or nothing) follows
"""

from pathlib import Path, PurePosixPath
from typing import Optional, Union

from ..constants import FileFormat, STRIPPED_INPUT_EXTENSIONS
from ..core.logger import get_output_logger


logger = get_output_logger('naming')


def derive_archive_name(input_name: str, identifier: str) -> str:
    """
    Build '<input without .gz/.xml>.<BAN>.xml'.

    Args:
        input_name: Input file name or path
        identifier: BAN being extracted

    Returns:
        Derived name (directory part kept if input_name has one)

    Example:
        derive_archive_name('bills.xml.gz', '1002')  # 'bills.xml.1002.xml'
        derive_archive_name('bills', '1002')         # 'bills.1002.xml'
    """
    suffix = f'.{identifier}.xml'
    base, dot, extension = input_name.rpartition('.')
    if dot and extension in STRIPPED_INPUT_EXTENSIONS:
        return base + suffix
    return input_name + suffix


def entry_name_for(input_name: str, identifier: str) -> str:
    """Name of the single entry inside a ZIP output."""
    return derive_archive_name(PurePosixPath(input_name).name, identifier)


def resolve_output_path(
    input_name: str,
    identifier: str,
    output: Optional[Union[str, Path]],
    file_format: FileFormat,
    remote: bool = False
) -> Path:
    """
    Decide where the extracted record is written.

    - no output given: derived name next to a local input, or in the
      current directory for a remote input
    - output is an existing directory: derived name inside it
    - otherwise: output as given

    Args:
        input_name: Input path (local or remote)
        identifier: BAN being extracted
        output: Requested output path, may be None or empty
        file_format: Output format, selects the extension
        remote: True when input_name is a path on the SSH server

    Returns:
        Output file path
    """
    if output is not None and str(output).strip():
        output_path = Path(output)
        if not output_path.is_dir():
            return output_path

        derived = output_path / (entry_name_for(input_name, identifier) + file_format.extension)
        logger.info(f"Output file is directory, constructed file name is {derived}")
        return derived

    if remote:
        derived = Path(entry_name_for(input_name, identifier) + file_format.extension)
    else:
        derived = Path(derive_archive_name(input_name, identifier) + file_format.extension)
    logger.info(f"Output file name is empty, constructed new one is {derived}")
    return derived


__all__ = [
    'derive_archive_name',
    'entry_name_for',
    'resolve_output_path',
]

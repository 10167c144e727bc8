# stdlib
from pathlib import Path
# projectlib
from battery_trends.utils.typing import Address

def validate_directory(address: Address) -> Path:
    """
    Return `address` as a ``Path`` to an existing directory.

    Raises
    ------
    NotADirectoryError
        If the directory does not exist.
    """
    path = Path(address)
    if not path.is_dir():
        raise NotADirectoryError(
            f"{path} does not exist or is not a directory."
        )
    return path

def validate_address(address: Address, *, extension: str = ".csv") -> Path:
    """
    Validate the path of an input file before reading it.

    A path without a suffix is given `extension`; a path with a
    different suffix is rejected.

    Parameters
    ----------
    address : Address
        File path as a string or ``Path``.
    extension : str, default ".csv"
        Expected file extension.

    Returns
    -------
    pathlib.Path
        Path to an existing file.

    Raises
    ------
    NotADirectoryError
        If the parent directory does not exist.
    ValueError
        If the file has a different extension.
    FileNotFoundError
        If the file does not exist.
    """
    path = Path(address)
    validate_directory(path.parent)
    if not path.suffix:
        path = path.with_suffix(extension)
    elif path.suffix != extension:
        msg = f"{path} must be a {extension} file."
        raise ValueError(msg)
    if not path.is_file():
        msg = f"{path} is not a file or does not exist."
        raise FileNotFoundError(msg)

    return path

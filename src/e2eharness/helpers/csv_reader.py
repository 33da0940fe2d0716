from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd


def read_csv(file_path: Union[str, Path]) -> List[Dict[str, str]]:
    """
    Reads a CSV file with a header row into a list of row dicts.

    Cells are kept as strings; empty cells become "".

    Example:
        users = read_csv("test-data/users.csv")
        for user in users:
            login_page.login(user["username"], user["password"])
    """
    return read_csv_with_options(file_path)


def read_csv_with_options(file_path: Union[str, Path], **options: Any) -> List[Dict[str, Any]]:
    """
    Reads a CSV file with extra `pandas.read_csv` options (separator, columns, ...).

    Example:
        rows = read_csv_with_options("data.csv", sep=";", usecols=["name", "email"])
    """
    options.setdefault("dtype", str)
    options.setdefault("keep_default_na", False)
    df = pd.read_csv(file_path, **options)
    return df.to_dict(orient="records")

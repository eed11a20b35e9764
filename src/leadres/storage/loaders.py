"""Loaders for account fixture files."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from leadres.core.models import AccountSchema

logger = logging.getLogger(__name__)


def load_accounts_json(path: Path | str) -> list[AccountSchema]:
    """Load accounts from a JSON file.

    Args:
        path: JSON file holding either a list of account objects or an object
            with an "accounts" list. Field names may be camelCase
            (``companyName``) or snake_case (``company_name``).

    Returns:
        Accounts in file order.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the JSON structure or an account row is invalid

    Expected JSON format:
        {"accounts": [
            {"id": 1, "companyName": "ABC Manufacturing Inc",
             "address": "123 Main St, Atlanta, GA", "phone": null, "website": null},
            ...
        ]}

    Example:
        >>> accounts = load_accounts_json("data/accounts.json")
        >>> print(f"{len(accounts)} accounts")
    """
    path = Path(path)
    if not path.exists():
        msg = f"Account file not found: {path}"
        raise FileNotFoundError(msg)

    with open(path) as f:
        data = json.load(f)

    rows = data.get("accounts") if isinstance(data, dict) else data
    if not isinstance(rows, list):
        msg = f"Invalid format in {path}: expected a list of accounts or an 'accounts' key"
        raise ValueError(msg)

    accounts: list[AccountSchema] = []
    for index, row in enumerate(rows):
        try:
            accounts.append(AccountSchema.model_validate(row))
        except ValidationError as exc:
            msg = f"Invalid account at index {index} in {path}: {exc}"
            raise ValueError(msg) from exc

    logger.info("Loaded %d accounts from %s", len(accounts), path)
    return accounts

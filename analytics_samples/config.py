"""
Configuration shared by the sample programs: property ID, credential files and logging.
"""
import os
import json
import logging
from typing import Any, Dict, Optional

# TODO(developer): Replace with your Google Analytics 4 property ID or set GA4_PROPERTY_ID.
DEFAULT_PROPERTY_ID = 'YOUR-GA4-PROPERTY-ID'
DEFAULT_OAUTH2_KEYS_FILE = 'oauth2.keys.json'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def get_property_id(property_id: Optional[str] = None) -> str:
    """
    Resolve the GA4 property ID.

    Order: explicit argument, GA4_PROPERTY_ID environment variable, placeholder.
    A resource name like 'properties/1234' is reduced to '1234'.
    """
    value = property_id or os.getenv('GA4_PROPERTY_ID') or DEFAULT_PROPERTY_ID
    value = value.strip()
    if value.startswith('properties/'):
        value = value.split('/', 1)[1]
    if value == DEFAULT_PROPERTY_ID:
        logger.warning('Using placeholder property ID; pass a property ID or set GA4_PROPERTY_ID')
    return value


def get_credentials_path() -> Optional[str]:
    """
    Return GOOGLE_APPLICATION_CREDENTIALS if set.

    An unset variable is fine (Application Default Credentials are resolved by
    google-auth); a variable pointing at a missing file is not.
    """
    creds_path = os.getenv('GOOGLE_APPLICATION_CREDENTIALS')
    if creds_path and not os.path.isfile(creds_path):
        raise EnvironmentError(f'GOOGLE_APPLICATION_CREDENTIALS points to a missing file: {creds_path}')
    return creds_path


def get_oauth2_keys_path(path: Optional[str] = None) -> str:
    return path or os.getenv('GA4_OAUTH2_KEYS') or DEFAULT_OAUTH2_KEYS_FILE


def load_oauth2_keys(path: str) -> Dict[str, Any]:
    """
    Load an OAuth 2.0 client ID file downloaded from the Google Cloud console.

    Args:
        path: Path to the JSON file.
    Returns:
        The full client config, e.g. {'web': {'client_id': ..., ...}}.
    Raises:
        FileNotFoundError: the file does not exist.
        ValueError: the file is not valid JSON or lacks client fields.
    """
    with open(path, encoding='utf-8') as f:
        try:
            keys = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f'OAuth2 keys file {path} is not valid JSON: {e}') from e

    if not isinstance(keys, dict):
        raise ValueError(f'OAuth2 keys file {path} must contain a JSON object')

    section = keys.get('web') or keys.get('installed')
    if not section:
        raise ValueError(f"OAuth2 keys file {path} has no 'web' or 'installed' section")

    missing = [field for field in ('client_id', 'client_secret', 'redirect_uris') if not section.get(field)]
    if missing:
        raise ValueError(f"OAuth2 keys file {path} is missing: {', '.join(missing)}")

    return keys


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging on stderr. Level from argument, LOG_LEVEL, or INFO.
    """
    level_name = (level or os.getenv('LOG_LEVEL') or 'INFO').upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()]
    )

import requests

from news_migration.config import MigrationConfig
from news_migration.migrators.content_api import NEWS_ENDPOINT, api_headers

from .errors import PreFlightCheckError, log_message


def run_pre_flight_checks(config: MigrationConfig, session: requests.Session = None) -> None:
    """
    Verifies that both ends of the migration are reachable before any
    article is touched.

    Args:
        config: The migration configuration.
        session: Optional HTTP session, mainly for tests.

    Raises:
        PreFlightCheckError: If any check fails.
    """
    log_message("Running pre-flight checks...")
    session = session or requests.Session()
    timeout = config.migration.timeout
    dest = config.destination

    if not dest.api_base:
        raise PreFlightCheckError("Destination API base URL (destination.api_base) is not configured.")
    if not dest.access_token:
        raise PreFlightCheckError("Destination access token (destination.access_token) is not configured.")

    # Check 1: the listing endpoint accepts the token
    try:
        response = session.get(
            f"{dest.api_base}{NEWS_ENDPOINT}",
            headers=api_headers(dest),
            params={"page": 1, "pageSize": 1},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.HTTPError as e:
        if e.response.status_code in (401, 403):
            raise PreFlightCheckError("The destination access token is invalid or has expired.")
        raise PreFlightCheckError(f"Unexpected error from the destination listing endpoint: {e}")
    except requests.RequestException as e:
        raise PreFlightCheckError(f"Network error reaching the destination API: {e}")

    # Check 2: the legacy archive index answers
    archive_url = f"{config.legacy.base_url}/{config.legacy.archive_path.lstrip('/')}"
    try:
        response = session.get(archive_url, params={"page": 1}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise PreFlightCheckError(f"Legacy archive index {archive_url} is not reachable: {e}")

    log_message("Pre-flight checks passed successfully.")

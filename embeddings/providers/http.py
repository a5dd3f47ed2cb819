"""HTTP helper shared by the remote embedding providers."""
from typing import Any, Dict, Optional

import requests

from domain.errors import EmbeddingServiceError


def post_json(
    url: str,
    payload: Dict[str, Any],
    timeout: int,
    service: str,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """POST a JSON body and return the decoded response.

    Every transport, HTTP and decoding failure, and any body that is not a
    JSON object, becomes an EmbeddingServiceError naming the service.
    """
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout)
        response.raise_for_status()
        result = response.json()
    except requests.exceptions.ConnectionError as e:
        raise EmbeddingServiceError(
            f"Failed to connect to {service}. Error: {e}", step="embedding"
        ) from e
    except requests.exceptions.Timeout as e:
        raise EmbeddingServiceError(
            f"Request to {service} timed out after {timeout}s. Error: {e}",
            step="embedding",
        ) from e
    except requests.exceptions.HTTPError as e:
        body = e.response.text if e.response is not None else "N/A"
        raise EmbeddingServiceError(
            f"{service} returned error: {e}. Response: {body}", step="embedding"
        ) from e
    except (requests.exceptions.RequestException, ValueError) as e:
        raise EmbeddingServiceError(
            f"Unexpected error calling {service}: {e}", step="embedding"
        ) from e

    if not isinstance(result, dict):
        raise EmbeddingServiceError(
            f"Unexpected response format from {service}: {type(result).__name__} body",
            step="embedding",
        )
    return result

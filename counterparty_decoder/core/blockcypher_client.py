"""
BlockCypher API client for fetching single Bitcoin transactions.

API Documentation: https://www.blockcypher.com/dev/bitcoin/#transaction-endpoint
"""

import time
from typing import Any, Dict, Optional

import requests
import structlog

from counterparty_decoder.core.transaction_decoder import TransactionDecoder
from counterparty_decoder.errors import TransactionFetchError
from counterparty_decoder.models.config import DecoderConfig

logger = structlog.get_logger(__name__)


class BlockCypherClient:
    """
    BlockCypher client for transaction lookups.

    The unauthenticated API is limited to a few requests per second, so
    requests are spaced by ``rate_limit_delay`` and 429 responses are retried
    after the advertised ``Retry-After``.
    """

    def __init__(self, config: Optional[DecoderConfig] = None,
                 session: Optional[requests.Session] = None):
        self.config = config or DecoderConfig()
        self.session = session or requests.Session()
        self.session.headers.update({
            'User-Agent': 'counterparty-decoder/1.0.0',
            'Accept': 'application/json'
        })

        self._last_request_time = 0.0

        logger.info("BlockCypher client initialized",
                    base_url=self.config.blockcypher_base_url,
                    has_token=bool(self.config.blockcypher_token))

    def _rate_limit(self):
        """Apply rate limiting between requests."""
        elapsed = time.time() - self._last_request_time
        if elapsed < self.config.rate_limit_delay:
            time.sleep(self.config.rate_limit_delay - elapsed)
        self._last_request_time = time.time()

    def _make_request(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Make API request with retry logic."""
        params = dict(params or {})
        if self.config.blockcypher_token:
            params['token'] = self.config.blockcypher_token

        attempts = self.config.retry_attempts
        for attempt in range(attempts):
            try:
                self._rate_limit()
                response = self.session.get(url, params=params, timeout=self.config.request_timeout)

                if response.status_code == 429:
                    wait_time = int(response.headers.get('Retry-After', 1))
                    logger.warning("Rate limited, waiting", wait_time=wait_time)
                    time.sleep(wait_time)
                    continue

                if response.status_code == 404:
                    raise TransactionFetchError(f"Not found: {url}")

                response.raise_for_status()
                return response.json()

            except (requests.RequestException, ValueError) as e:
                logger.warning("API request failed",
                               url=url,
                               attempt=attempt + 1,
                               error=str(e))

                if attempt == attempts - 1:
                    raise TransactionFetchError(f"Request failed after {attempts} attempts: {e}")

                time.sleep(self.config.retry_delay * (2 ** attempt))

        raise TransactionFetchError(f"Request failed after {attempts} attempts: rate limited")

    def get_transaction(self, tx_hash: str) -> Dict[str, Any]:
        """Fetch the explorer document of one transaction."""
        tx_hash = tx_hash.strip().lower()
        if len(tx_hash) != 64 or any(c not in '0123456789abcdef' for c in tx_hash):
            raise ValueError(f"Invalid transaction hash: {tx_hash}")

        url = self.config.transaction_url_template.format(tx_hash=tx_hash)
        limit = self.config.tx_output_limit
        return self._make_request(url, {'instart': 0, 'outstart': 0, 'limit': limit})

    def close(self):
        self.session.close()


def get_json(tx_hash: str, config: Optional[DecoderConfig] = None,
             client: Optional[BlockCypherClient] = None) -> Dict[str, Any]:
    """Fetch a transaction and return its decoded response document."""
    config = config or DecoderConfig()
    owns_client = client is None
    if owns_client:
        client = BlockCypherClient(config)

    try:
        document = client.get_transaction(tx_hash)
    finally:
        if owns_client:
            client.close()

    return TransactionDecoder(config).decode(document).to_dict()

"""
Live-data connectors for jurisdictions with an open tariff or product database.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import quote

from loguru import logger

from hscode_centrovert.config.settings import Config
from hscode_centrovert.config.region_policies import SAUDI_CONNECTOR, SINGAPORE_CONNECTOR, UAE_CONNECTOR
from hscode_centrovert.exceptions import FetchError, FetchTimeoutError
from hscode_centrovert.models.hs_models import ConnectorOutcome, ConnectorStatus
from hscode_centrovert.utils.common import compact_json
from hscode_centrovert.utils.http import FetchResponse, timed_fetch
from hscode_centrovert.utils.logging_utils import log_connector_outcome

Fetcher = Callable[..., FetchResponse]


class RegionalConnector:
    """
    Base class for best-effort live lookups.

    ``lookup`` never raises: every failure becomes a ConnectorOutcome with an
    empty evidence string.
    """

    name = "connector"
    source_name = "Live Database"
    requires_credential = True
    record_limit = Config.MAX_EVIDENCE_RECORDS

    def __init__(self, credential: Optional[str] = None, timeout_ms: Optional[int] = None,
                 fetcher: Optional[Fetcher] = None):
        self.credential = credential
        self.timeout_ms = Config.CONNECTOR_TIMEOUT_MS if timeout_ms is None else timeout_ms
        self.fetcher = fetcher or timed_fetch

    def fetch_region_evidence(self, query: str) -> str:
        """Return an evidence fragment for the query, or an empty string."""
        return self.lookup(query).evidence

    def lookup(self, query: str) -> ConnectorOutcome:
        outcome = self._lookup(query)
        log_connector_outcome(self.name, outcome.status.value, outcome.detail)
        return outcome

    def _lookup(self, query: str) -> ConnectorOutcome:
        if self.requires_credential and not self.credential:
            return self._outcome(ConnectorStatus.SKIPPED, f"No API token configured for {self.source_name}")
        if not query or not query.strip():
            return self._outcome(ConnectorStatus.SKIPPED, "Empty query")

        url, options = self._build_request(query.strip())
        try:
            response = self.fetcher(url, options, self.timeout_ms)
        except FetchTimeoutError:
            return self._outcome(ConnectorStatus.TIMEOUT, f"Request timed out (exceeded {self.timeout_ms}ms)")
        except FetchError as e:
            return self._outcome(ConnectorStatus.NETWORK_ERROR, f"Network error: {str(e)}")

        if not response.ok:
            return self._outcome(self._classify_status(response.status_code),
                                 f"Request failed. Status: {response.status_code} {response.reason}")

        if 'json' not in response.content_type.lower():
            return self._outcome(ConnectorStatus.MALFORMED, f"Unexpected content type: '{response.content_type}'")
        try:
            data = response.json()
        except ValueError as e:
            return self._outcome(ConnectorStatus.MALFORMED, f"Invalid JSON body: {str(e)}")

        records = self._extract_records(data)
        if records is None:
            return self._outcome(ConnectorStatus.MALFORMED, "Unexpected response structure")
        if not records:
            return self._outcome(ConnectorStatus.NO_MATCH, f"No records for '{query[:50]}'")

        summary = [self._summarize_record(r) for r in records[:self.record_limit]]
        evidence = f"Match found in {self.source_name}: {compact_json(summary)}"
        return self._outcome(ConnectorStatus.MATCH, f"{len(summary)} record(s)", evidence)

    def _outcome(self, status: ConnectorStatus, detail: str, evidence: str = "") -> ConnectorOutcome:
        return ConnectorOutcome(connector=self.name, status=status, evidence=evidence, detail=detail)

    @staticmethod
    def _classify_status(status_code: int) -> ConnectorStatus:
        if status_code in (401, 403):
            return ConnectorStatus.AUTH_ERROR
        if status_code == 429:
            return ConnectorStatus.RATE_LIMITED
        if status_code == 503:
            return ConnectorStatus.UNAVAILABLE
        return ConnectorStatus.HTTP_ERROR

    def _auth_headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {self.credential}",
            'Accept': 'application/json'
        }

    def _build_request(self, query: str) -> Tuple[str, Dict[str, Any]]:
        raise NotImplementedError

    def _extract_records(self, data: Any) -> Optional[List[Any]]:
        """Return matched records, [] for no match, None for an unexpected shape."""
        raise NotImplementedError

    def _summarize_record(self, record: Any) -> Any:
        return record


class SingaporeConnector(RegionalConnector):
    """data.gov.sg datastore search over the HSA product register."""

    name = SINGAPORE_CONNECTOR
    source_name = "Singapore HSA Database"
    requires_credential = False
    record_limit = Config.SINGAPORE_RECORD_LIMIT

    def __init__(self, credential: Optional[str] = None, timeout_ms: Optional[int] = None,
                 fetcher: Optional[Fetcher] = None, resource_id: Optional[str] = None):
        super().__init__(credential, timeout_ms, fetcher)
        self.resource_id = resource_id or Config.SINGAPORE_RESOURCE_ID

    def _build_request(self, query: str) -> Tuple[str, Dict[str, Any]]:
        url = (f"{Config.SINGAPORE_API_URL}?resource_id={self.resource_id}"
               f"&q={quote(query)}&limit={self.record_limit}")
        headers = {'Accept': 'application/json'}
        if self.credential:
            headers['x-api-key'] = self.credential
        return url, {'headers': headers}

    def _extract_records(self, data: Any) -> Optional[List[Any]]:
        if not isinstance(data, dict):
            return None
        result = data.get('result')
        if not isinstance(result, dict) or not isinstance(result.get('records'), list):
            return None
        return [r for r in result['records'] if isinstance(r, dict)]

    def _summarize_record(self, record: Dict[str, Any]) -> Dict[str, str]:
        return {
            'product': record.get('device_name') or record.get('product_name') or "Unknown Product",
            'risk_class': record.get('risk_classification') or "N/A",
            'description': record.get('description') or ""
        }


class UAEConnector(RegionalConnector):
    """Dubai Pulse customs commodity lookup."""

    name = UAE_CONNECTOR
    source_name = "Dubai Customs Database"

    def _build_request(self, query: str) -> Tuple[str, Dict[str, Any]]:
        url = f"{Config.UAE_API_URL}?commoditydescription={quote(query)}"
        return url, {'headers': self._auth_headers()}

    def _extract_records(self, data: Any) -> Optional[List[Any]]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in ('results', 'data', 'items', 'records'):
                if isinstance(data.get(key), list):
                    return data[key]
        return None


class SaudiConnector(RegionalConnector):
    """ZATCA integrated tariff search."""

    name = SAUDI_CONNECTOR
    source_name = "ZATCA Tariff Schedule"

    def __init__(self, credential: Optional[str] = None, timeout_ms: Optional[int] = None,
                 fetcher: Optional[Fetcher] = None, client_id: Optional[str] = None):
        super().__init__(credential, timeout_ms, fetcher)
        self.client_id = client_id or Config.SAUDI_CLIENT_ID

    def _build_request(self, query: str) -> Tuple[str, Dict[str, Any]]:
        url = f"{Config.SAUDI_API_URL}?description={quote(query)}&language=en"
        headers = self._auth_headers()
        headers['X-Client-ID'] = self.client_id
        return url, {'headers': headers}

    def _extract_records(self, data: Any) -> Optional[List[Any]]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get('items'), list):
            return data['items']
        return None


CONNECTOR_REGISTRY = {
    SINGAPORE_CONNECTOR: (SingaporeConnector, 'SINGAPORE_API_KEY'),
    UAE_CONNECTOR: (UAEConnector, 'UAE_API_TOKEN'),
    SAUDI_CONNECTOR: (SaudiConnector, 'SAUDI_API_TOKEN'),
}


def build_default_connectors(fetcher: Optional[Fetcher] = None) -> Dict[str, RegionalConnector]:
    """Instantiate every registered connector with credentials from Config."""
    connectors = {}
    for key, (connector_cls, credential_key) in CONNECTOR_REGISTRY.items():
        credential = getattr(Config, credential_key, None)
        connectors[key] = connector_cls(credential=credential, fetcher=fetcher)
        if connector_cls.requires_credential and not credential:
            logger.warning(f"[{key}] Skipping: No API token found in environment variables ({credential_key}).")
    return connectors

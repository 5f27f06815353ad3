"""
Evidence gathering: picks the region's live sources and merges their results.
"""
from typing import Callable, Dict, Optional

from loguru import logger

from hscode_centrovert.config.region_policies import get_region_policy
from hscode_centrovert.models.hs_models import ConnectorStatus, EvidenceContext, GatheredContext, TargetRegion
from hscode_centrovert.services.regional_connectors import RegionalConnector, build_default_connectors
from hscode_centrovert.utils.common import emit_status
from hscode_centrovert.utils.logging_utils import log_evidence_summary


class EvidenceAggregator:
    """Service that turns a region and query into prompt-ready evidence."""

    def __init__(self, connectors: Optional[Dict[str, RegionalConnector]] = None):
        """
        Initialize the aggregator.

        Args:
            connectors: Connector instances keyed by policy connector name.
                Defaults to every registered connector configured from Config.
        """
        self.connectors = build_default_connectors() if connectors is None else connectors

    def gather(self, region: TargetRegion, query: str,
               on_status: Optional[Callable[[str], None]] = None) -> GatheredContext:
        """
        Select the region policy and collect live evidence for the query.

        Failures while gathering never abort the request: whatever evidence
        was collected before the failure is kept.
        """
        policy = get_region_policy(region)
        evidence = EvidenceContext()

        emit_status(on_status, f"{policy.search_label}...")
        try:
            if policy.live_connector:
                connector = self.connectors.get(policy.live_connector)
                if connector is None:
                    logger.warning(f"No connector registered for '{policy.live_connector}' ({policy.region.value})")
                else:
                    evidence.add(connector.lookup(query))
        except Exception as e:
            logger.opt(exception=True).warning(f"Error during context gathering for {policy.region.value}: {str(e)}")

        attempted = sum(1 for o in evidence.outcomes if o.status != ConnectorStatus.SKIPPED)
        log_evidence_summary(policy.region.value, sum(1 for o in evidence.outcomes if o.matched), attempted)

        return GatheredContext(
            policy=policy,
            evidence=evidence,
            instruction_block=policy.instruction_block,
            tool_selection=policy.retrieval_tools
        )

    def select_policy_and_gather_evidence(self, region: TargetRegion, query: str):
        """Return (evidence text, instruction block, tool selection) for a region."""
        context = self.gather(region, query)
        return context.evidence.text, context.instruction_block, context.tool_selection

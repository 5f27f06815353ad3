"""
Unit tests for the region policy table
"""

import pytest

from hscode_centrovert.config import region_policies
from hscode_centrovert.config.region_policies import REGION_POLICIES, get_region_policy
from hscode_centrovert.models.hs_models import RetrievalTool, TargetRegion


class TestRegionPolicyTable:
    """Test cases for the static region policy lookup"""

    @pytest.mark.parametrize("region", list(TargetRegion))
    def test_every_region_has_instructions(self, region):
        """Test that lookup succeeds with a non-empty instruction block for each region"""
        policy = get_region_policy(region)
        assert policy.region is region
        assert policy.instruction_block.strip()
        assert policy.fallback_note
        assert policy.search_label

    def test_table_covers_exactly_ten_regions(self):
        """Test that the table has one entry per jurisdiction"""
        assert len(TargetRegion) == 10
        assert set(REGION_POLICIES) == set(TargetRegion)

    def test_lookup_accepts_display_value(self):
        """Test that lookup resolves regions from their display value"""
        assert get_region_policy("Saudi Arabia").region is TargetRegion.SAUDI_ARABIA
        assert get_region_policy("Global (6-digit)").region is TargetRegion.GLOBAL

    def test_search_enabled_regions(self):
        """Test which regions enable web search grounding"""
        searching = {r for r, p in REGION_POLICIES.items() if RetrievalTool.WEB_SEARCH in p.retrieval_tools}
        assert searching == {TargetRegion.SINGAPORE, TargetRegion.MALAYSIA, TargetRegion.INDIA}

    def test_live_connectors(self):
        """Test connector assignment for regions with live sources"""
        assert get_region_policy(TargetRegion.SINGAPORE).live_connector == region_policies.SINGAPORE_CONNECTOR
        assert get_region_policy(TargetRegion.UAE).live_connector == region_policies.UAE_CONNECTOR
        assert get_region_policy(TargetRegion.SAUDI_ARABIA).live_connector == region_policies.SAUDI_CONNECTOR
        assert get_region_policy(TargetRegion.KUWAIT).live_connector == region_policies.UAE_CONNECTOR
        assert get_region_policy(TargetRegion.GLOBAL).live_connector == region_policies.UAE_CONNECTOR

    def test_region_conventions_in_instructions(self):
        """Test that region-specific tax conventions appear in the instructions"""
        assert "9%" in get_region_policy(TargetRegion.SINGAPORE).instruction_block
        assert "15%" in get_region_policy(TargetRegion.SAUDI_ARABIA).instruction_block
        assert "Saber" in get_region_policy(TargetRegion.SAUDI_ARABIA).instruction_block
        assert "10%" in get_region_policy(TargetRegion.BAHRAIN).instruction_block

    def test_table_is_read_only(self):
        """Test that the exported table cannot be mutated"""
        with pytest.raises(TypeError):
            REGION_POLICIES[TargetRegion.GLOBAL] = None

    def test_validation_rejects_missing_region(self):
        """Test that the startup check fails when a region has no entry"""
        partial = dict(REGION_POLICIES)
        del partial[TargetRegion.OMAN]
        with pytest.raises(RuntimeError, match="Oman"):
            region_policies._validate_policies(partial)

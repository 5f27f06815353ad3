"""
Per-jurisdiction retrieval strategy and classification rules.
"""
from types import MappingProxyType
from typing import Mapping

from hscode_centrovert.models.hs_models import RegionPolicy, RetrievalTool, TargetRegion

# Connector keys, see services.regional_connectors.CONNECTOR_REGISTRY
SINGAPORE_CONNECTOR = "singapore_hsa"
UAE_CONNECTOR = "dubai_customs"
SAUDI_CONNECTOR = "zatca_tariff"

WEB_SEARCH = frozenset({RetrievalTool.WEB_SEARCH})
NO_TOOLS = frozenset()

SEARCH_FALLBACK_NOTE = "No direct match in live government databases. Rely on internal knowledge or Google Search."
KNOWLEDGE_FALLBACK_NOTE = "No direct match in live government databases. Rely on internal knowledge of the published tariff."


def _gcc_policy(region: TargetRegion, vat_rule: str) -> RegionPolicy:
    return RegionPolicy(
        region=region,
        retrieval_tools=NO_TOOLS,
        instruction_block=f"""
          - Use the **Unified GCC Common Customs Tariff** as applied by {region.value} Customs.
          - Provide 8-digit codes.
          - Standard GCC common external duty is 5% unless the tariff lists an exemption or a protective rate.
          - **VAT**: {vat_rule}
          - Cite the national customs authority or GCC tariff line as 'sourceReference' when known.
        """,
        live_connector=UAE_CONNECTOR,
        fallback_note=KNOWLEDGE_FALLBACK_NOTE,
        search_label="Searching Dubai Customs (GCC Common Tariff)"
    )


_POLICIES = {
    TargetRegion.SINGAPORE: RegionPolicy(
        region=TargetRegion.SINGAPORE,
        retrieval_tools=WEB_SEARCH,
        instruction_block="""
          - **CRITICAL**: You MUST use the Google Search Tool to find the exact 8-digit HS Code from the Singapore Customs TradeNet or 'customs.gov.sg' website.
          - The last 2 digits are crucial. Do not default to '00' unless verified.
          - Standard GST is 9%.
          - Check for SFA (Food), HSA (Health Sciences), or Strategic Goods Control controls.
          - Cite the TradeNet / AHTN page used as 'sourceReference'.
        """,
        live_connector=SINGAPORE_CONNECTOR,
        fallback_note=SEARCH_FALLBACK_NOTE,
        search_label="Searching Singapore TradeNet & AHTN"
    ),
    TargetRegion.MALAYSIA: RegionPolicy(
        region=TargetRegion.MALAYSIA,
        retrieval_tools=WEB_SEARCH,
        instruction_block="""
          - Use the **Malaysian Customs Duties Order (PDK)** and ASEAN Harmonized Tariff Nomenclature (AHTN).
          - Provide 10-digit codes where possible, otherwise 8-digit AHTN.
          - **Tax**: Apply **SST** (Sales and Service Tax). Sales tax is typically 5% or 10%.
          - **Restrictions**: Check for **SIRIM** approval for electronics, **MAQIS** for agriculture, and **NPRA** for cosmetics/drugs. Mention Approved Permits (AP) if required.
          - Cite the PDK / JKDM reference as 'sourceReference'.
        """,
        live_connector=None,
        fallback_note=SEARCH_FALLBACK_NOTE,
        search_label="Searching Malaysian PDK & AHTN"
    ),
    TargetRegion.INDIA: RegionPolicy(
        region=TargetRegion.INDIA,
        retrieval_tools=WEB_SEARCH,
        instruction_block="""
          - Use the **ITC-HS (Indian Trade Clarification based on Harmonized System)**.
          - Provide 8-digit codes.
          - **Tax**: Calculate **IGST** (Integrated GST) which is typically 5%, 12%, 18%, or 28%. Mention Social Welfare Surcharge (SWS) if applicable (usually 10% of BCD).
          - **Restrictions**: Check for **BIS** (Bureau of Indian Standards) CRO requirements, **FSSAI** for food, and **DGFT** (Directorate General of Foreign Trade) Import Policy (Free/Restricted/Prohibited).
          - Cite the CBIC / DGFT schedule used as 'sourceReference'.
        """,
        live_connector=None,
        fallback_note=SEARCH_FALLBACK_NOTE,
        search_label="Searching CBIC & DGFT ITC-HS schedules"
    ),
    TargetRegion.UAE: RegionPolicy(
        region=TargetRegion.UAE,
        retrieval_tools=NO_TOOLS,
        instruction_block="""
          - Use the GCC Common Customs Tariff as applied by Dubai Customs.
          - Provide 8-digit codes.
          - Standard VAT is 5%.
          - Check for **MOIAT** (ECAS/EQM conformity), **TDRA** (telecom equipment) and municipality food-safety requirements.
        """,
        live_connector=UAE_CONNECTOR,
        fallback_note=KNOWLEDGE_FALLBACK_NOTE,
        search_label="Searching Dubai Customs database"
    ),
    TargetRegion.SAUDI_ARABIA: RegionPolicy(
        region=TargetRegion.SAUDI_ARABIA,
        retrieval_tools=NO_TOOLS,
        instruction_block="""
          - **CRITICAL**: Use the **Saudi ZATCA Integrated Tariff**.
          - Provide **10-digit or 12-digit codes** where applicable (National Subheadings).
          - **VAT**: Standard VAT in Saudi Arabia is **15%**.
          - **Restrictions**: You MUST check for **Saber Platform** registration requirements.
          - Check for **SASO** (Standards), **SFDA** (Food/Drug), or **CITC** (Telecom) requirements.
        """,
        live_connector=SAUDI_CONNECTOR,
        fallback_note=KNOWLEDGE_FALLBACK_NOTE,
        search_label="Searching ZATCA Integrated Tariff"
    ),
    TargetRegion.QATAR: _gcc_policy(TargetRegion.QATAR, "Qatar does not levy VAT; state 'No VAT' and mention any excise tax."),
    TargetRegion.OMAN: _gcc_policy(TargetRegion.OMAN, "Standard VAT in Oman is 5%."),
    TargetRegion.BAHRAIN: _gcc_policy(TargetRegion.BAHRAIN, "Standard VAT in Bahrain is 10%."),
    TargetRegion.KUWAIT: _gcc_policy(TargetRegion.KUWAIT, "Kuwait does not levy VAT; state 'No VAT'."),
    TargetRegion.GLOBAL: RegionPolicy(
        region=TargetRegion.GLOBAL,
        retrieval_tools=NO_TOOLS,
        instruction_block="""
          - Use the **WCO Harmonized System nomenclature** only; do not apply any national extension.
          - Provide the 6-digit subheading (e.g. '8518.30').
          - Duty and tax vary by importing country: describe them as 'Varies by country' unless a rate is universal.
          - List restrictions that apply broadly (dual-use, CITES, dangerous goods, batteries).
        """,
        live_connector=UAE_CONNECTOR,
        fallback_note=KNOWLEDGE_FALLBACK_NOTE,
        search_label="Consulting WCO HS nomenclature"
    ),
}


def _validate_policies(policies) -> None:
    missing = [region.value for region in TargetRegion if region not in policies]
    if missing:
        raise RuntimeError(f"Region policy table is missing entries for: {', '.join(missing)}")
    for region, policy in policies.items():
        if policy.region is not region or not policy.instruction_block.strip():
            raise RuntimeError(f"Region policy for {region.value} is malformed")


_validate_policies(_POLICIES)

REGION_POLICIES: Mapping[TargetRegion, RegionPolicy] = MappingProxyType(_POLICIES)


def get_region_policy(region) -> RegionPolicy:
    """Return the policy for a region; every TargetRegion has one."""
    return REGION_POLICIES[TargetRegion.from_value(region)]

from hscode_centrovert.models.hs_models import ClassificationResult
from hscode_centrovert.utils.common import format_hs_code


def format_code(code):
    """Format an HS code for display, keeping the original text if it has no digits"""
    formatted = format_hs_code(code)
    return formatted or code or "N/A"


def format_confidence(score):
    """Format confidence score as a percentage"""
    return f"{score}%"


def format_bullets(items, empty="None"):
    """Render items as a bulleted list"""
    if not items:
        return f"  - {empty}"
    return "\n".join(f"  - {item}" for item in items)


def format_similar_items(result: ClassificationResult):
    """Render similar classifications as a fixed-width table"""
    if not result.similar_items:
        return "  None suggested"
    name_width = max(len("Product"), *(len(i.name) for i in result.similar_items))
    code_width = max(len("HS Code"), *(len(format_code(i.hs_code)) for i in result.similar_items))
    lines = [f"  {'Product':<{name_width}}  {'HS Code':<{code_width}}  Reason"]
    for item in result.similar_items:
        lines.append(f"  {item.name:<{name_width}}  {format_code(item.hs_code):<{code_width}}  {item.reason}")
    return "\n".join(lines)


def format_report(result: ClassificationResult, region: str = "") -> str:
    """Render a classification result as a plain-text compliance report"""
    rule = "=" * 72
    lines = [
        rule,
        "HS CODE CLASSIFICATION REPORT" + (f" - {region}" if region else ""),
        rule,
        f"HS Code:        {format_code(result.hs_code)}",
        f"Product:        {result.product_name or 'N/A'}",
        f"Description:    {result.description or 'N/A'}",
        f"Duty Rate:      {result.duty_rate or 'N/A'}",
        f"Tax Rate:       {result.tax_rate or 'N/A'}",
        f"Confidence:     {format_confidence(result.confidence_score)}",
        f"Source:         {result.source.value}",
    ]
    if result.source_reference:
        lines.append(f"Reference:      {result.source_reference}")
    lines += [
        "",
        "Restrictions:",
        format_bullets(result.restrictions),
        "",
        "Required Documents:",
        format_bullets(result.required_documents),
        "",
        "Reasoning:",
        f"  {result.reasoning or 'N/A'}",
        "",
        "Similar Classifications:",
        format_similar_items(result),
        rule,
        "Advisory only: verify against the official tariff before filing.",
    ]
    return "\n".join(lines)

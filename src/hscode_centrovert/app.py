import pandas as pd
import streamlit as st
from loguru import logger

from hscode_centrovert.classifier.hs_classifier import HSCodeClassifier
from hscode_centrovert.config.region_policies import get_region_policy
from hscode_centrovert.exceptions import ClassificationError
from hscode_centrovert.models.hs_models import ImagePayload, ResultSource, TargetRegion
from hscode_centrovert.utils.formatters import format_code, format_report
from hscode_centrovert.utils.logging_utils import setup_logger, log_system_startup, log_system_error

EXAMPLES = [
    "Wireless Bluetooth Headphones",
    "Organic green tea leaves, 500g packs",
    "Men's cotton t-shirts, knitted",
    "Lithium-ion power bank, 20000mAh",
]

# Initialize logging for Streamlit app
@st.cache_resource
def initialize_logging():
    """Initialize logging for the Streamlit application."""
    try:
        setup_logger("streamlit")
        log_system_startup("Streamlit HS Code Assistant")
        return True
    except Exception as e:
        st.error(f"Failed to setup logging: {e}")
        return False

@st.cache_resource
def initialize_classifier():
    initialize_logging()
    log_system_startup("Classifier Initialization")
    return HSCodeClassifier()

def render_result(result, region):
    """Render the result card for one classification."""
    confidence = result.confidence_score
    if confidence >= 80:
        confidence_class = "confidence-high"
    elif confidence >= 60:
        confidence_class = "confidence-medium"
    else:
        confidence_class = "confidence-low"
    source_class = "source-live" if result.source == ResultSource.LIVE_API else "source-ai"

    st.markdown(f"""
    <div class="result-card">
        <div class="result-header">{region} - {result.product_name or 'Classification'}</div>
        <div style="margin: 0.75rem 0;">
            <strong>HS Code:</strong> <span class="result-code">{format_code(result.hs_code)}</span>
            <span class="{source_class}">{result.source.value}</span>
        </div>
        <div style="margin: 0.75rem 0;"><strong>Description:</strong> {result.description}</div>
        <div style="margin: 0.75rem 0;">
            <strong>Confidence:</strong> <span class="{confidence_class}">{confidence}%</span>
        </div>
    </div>
    """, unsafe_allow_html=True)

    col_duty, col_tax = st.columns(2)
    col_duty.metric("Duty Rate", result.duty_rate or "N/A")
    col_tax.metric("Tax Rate", result.tax_rate or "N/A")

    if result.source_reference:
        st.caption(f"Source: {result.source_reference}")

    col_restrictions, col_documents = st.columns(2)
    with col_restrictions:
        st.markdown("**Restrictions**")
        for item in result.restrictions or ["None identified"]:
            st.markdown(f"- {item}")
    with col_documents:
        st.markdown("**Required Documents**")
        for item in result.required_documents or ["None identified"]:
            st.markdown(f"- {item}")

    with st.expander("Reasoning", expanded=False):
        st.write(result.reasoning or "N/A")

    if result.similar_items:
        st.markdown("**Similar Classifications**")
        st.dataframe(
            pd.DataFrame([
                {"Product": i.name, "HS Code": format_code(i.hs_code), "Reason": i.reason}
                for i in result.similar_items
            ]),
            hide_index=True,
            use_container_width=True
        )

    st.download_button(
        "Export Report",
        data=format_report(result, region),
        file_name=f"Centrovert_HS_{result.hs_code}.txt",
        mime="text/plain"
    )

st.set_page_config(
    page_title="HScode Centrovert",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
    <style>
    .header-container {
        background: linear-gradient(135deg, #1e3a5f 0%, #2c5282 100%);
        color: white;
        padding: 2rem;
        border-radius: 8px;
        margin-bottom: 2rem;
        text-align: center;
    }
    .header-title { font-size: 2.2rem; font-weight: 700; }
    .result-card {
        border: 1px solid #e2e8f0;
        border-left: 4px solid #2c5282;
        border-radius: 8px;
        padding: 1rem 1.5rem;
        margin-bottom: 1rem;
    }
    .result-header { font-weight: 600; font-size: 1.1rem; }
    .result-code { font-family: monospace; font-size: 1.4rem; font-weight: 700; }
    .confidence-high { color: #2f855a; font-weight: 600; }
    .confidence-medium { color: #b7791f; font-weight: 600; }
    .confidence-low { color: #c53030; font-weight: 600; }
    .source-live, .source-ai {
        margin-left: 0.75rem; padding: 0.15rem 0.5rem; border-radius: 999px; font-size: 0.8rem;
    }
    .source-live { background: #c6f6d5; color: #22543d; }
    .source-ai { background: #e2e8f0; color: #2d3748; }
    </style>
""", unsafe_allow_html=True)

if "history" not in st.session_state:
    st.session_state.history = []
if "description" not in st.session_state:
    st.session_state.description = ""

with st.sidebar:
    st.title("Target Region")
    region = st.selectbox(
        "Import jurisdiction",
        list(TargetRegion),
        format_func=lambda r: r.value,
        key="region_selection"
    )
    if get_region_policy(region).uses_web_search:
        st.caption("Google Search grounding enabled for this region")

    st.markdown("---")
    st.markdown("**Examples**")
    for example in EXAMPLES:
        if st.button(example, key=f"example_{example}", use_container_width=True):
            st.session_state.description = example

    st.markdown("---")
    st.markdown("**Recent Classifications**")
    if not st.session_state.history:
        st.caption("No classifications yet")
    for entry in reversed(st.session_state.history[-10:]):
        st.caption(f"{entry['region']}: {format_code(entry['result'].hs_code)} - {entry['query'][:40]}")

st.markdown("""
<div class="header-container">
    <div class="header-title">HScode.Centrovert</div>
    <div>Region-aware HS code classification with live tariff evidence</div>
</div>
""", unsafe_allow_html=True)

try:
    classifier = initialize_classifier()

    col_input, col_image = st.columns([2, 1])
    with col_input:
        description = st.text_area(
            "Product Description",
            key="description",
            height=120,
            placeholder="Describe the product: material, function, composition (e.g. 'Wireless Bluetooth Headphones')"
        )
    with col_image:
        uploaded = st.file_uploader("Product Photo (optional)", type=["jpg", "jpeg", "png", "webp"])
        if uploaded is not None:
            st.image(uploaded, use_container_width=True)

    classify_button = st.button("Classify Product", type="primary", use_container_width=True)

    if classify_button:
        if not description.strip() and uploaded is None:
            st.warning("Please enter a description or upload a photo")
        else:
            image = ImagePayload(data=uploaded.getvalue(), mime_type=uploaded.type) if uploaded else None
            with st.status("Preparing analysis...", expanded=False) as status:
                try:
                    result = classifier.identify(
                        description, region, image=image,
                        on_status=lambda message: status.update(label=message)
                    )
                    status.update(label="Classification complete", state="complete")
                    st.session_state.history.append({"query": description or "(image)", "region": region.value, "result": result})
                    st.session_state.last_result = (result, region.value)
                except ClassificationError as e:
                    status.update(label="Classification failed", state="error")
                    log_system_error("Classification", str(e))
                    st.error("Failed to classify product. Please ensure the description or image is clear.")

    if st.session_state.get("last_result"):
        render_result(*st.session_state.last_result)

except Exception as e:
    log_system_error("Application", str(e))
    logger.exception("Unhandled application error")
    st.error(f"An error occurred: {str(e)}")

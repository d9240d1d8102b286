import streamlit as st

# MUST be the first Streamlit command
st.set_page_config(layout="centered", page_title="Resume Skill Extractor")

import logging
import mimetypes

from resume_skills import config
from resume_skills.preparer import UploadCandidate, describe_allowed_types
from resume_skills.renderer import render_skill_panel
from resume_skills.skill_extraction import Status, failure_hint
from resume_skills.submission import init_state, submit_resume

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)

# Available models for each provider
MODEL_OPTIONS = {
    "OpenAI": [
        "gpt-4o-mini",
        "gpt-4o",
        "gpt-4.1-mini",
    ],
    "Ollama": [
        "llama3.2-vision",
        "llava:7b",
        "llama3.1:8b",
        "qwen2.5:7b",
    ],
}
PROVIDER_KEYS = {"OpenAI": "openai", "Ollama": "ollama"}

try:
    limits = config.get_upload_limits()
except ValueError as e:
    logging.getLogger(__name__).error("Invalid upload configuration: %s", e)
    st.error(f"⚙️ Configuration error: {e}. Fix the setting in your environment or .env file and reload.")
    st.stop()

# Initialize session state variables
init_state(st.session_state)
if "selected_provider" not in st.session_state:
    st.session_state.selected_provider = (
        "Ollama" if config.LLM_PROVIDER == "ollama" else "OpenAI"
    )
if "selected_model" not in st.session_state:
    st.session_state.selected_model = config.get_model_for_provider(
        PROVIDER_KEYS[st.session_state.selected_provider]
    )


_EXTENSIONS = {
    "application/pdf": ["pdf"],
    "text/plain": ["txt"],
    "image/jpeg": ["jpg", "jpeg"],
    "image/png": ["png"],
    "image/webp": ["webp"],
}


def uploader_extensions(allowed):
    """Extensions for st.file_uploader, or None to accept anything."""
    if allowed == config.ANY_TYPE:
        return None
    exts = set()
    for mime in allowed:
        exts.update(_EXTENSIONS.get(mime) or [e.lstrip(".") for e in mimetypes.guess_all_extensions(mime)])
    return sorted(exts) or None


st.title("📄 → 🏷️ Resume Skill Extractor")
st.markdown("Upload your resume and let AI list the key skills it finds.")

# --- LLM PROVIDER AND MODEL SELECTION ---
with st.sidebar:
    st.markdown("### 🤖 AI Model Configuration")
    provider = st.selectbox(
        "Provider",
        options=list(MODEL_OPTIONS.keys()),
        index=list(MODEL_OPTIONS.keys()).index(st.session_state.selected_provider),
        help="Choose between OpenAI API or local Ollama models",
    )
    if provider != st.session_state.selected_provider:
        st.session_state.selected_provider = provider
        # Reset to first model of new provider
        st.session_state.selected_model = MODEL_OPTIONS[provider][0]

    options = MODEL_OPTIONS[provider]
    model = st.selectbox(
        "Model",
        options=options,
        index=options.index(st.session_state.selected_model)
        if st.session_state.selected_model in options else 0,
        help=f"Select the {provider} model used for extraction",
    )
    st.session_state.selected_model = model

    if provider == "Ollama" and limits.mode == config.DATA_URI_MODE:
        st.info("Ollama models read images and TXT files inline; PDFs need OpenAI or text mode.")

# --- UPLOAD ---
st.subheader("Upload Your Resume")
size_note = (
    f"max {limits.max_bytes / (1024 * 1024):g}MB" if limits.max_bytes else "no size limit"
)
st.caption(
    f"Accepted: {describe_allowed_types(limits.allowed_types)} ({size_note}). "
    "For best skill extraction, use PDF or plain text (.txt) files."
)

uploaded = st.file_uploader(
    "Resume File",
    type=uploader_extensions(limits.allowed_types),
)
submit = st.button(
    "Extracting..." if st.session_state.is_loading else "Extract Skills",
    type="primary",
    disabled=uploaded is None or st.session_state.is_loading,
)

panel_slot = st.empty()


def show_panel(state) -> None:
    panel_slot.markdown(render_skill_panel(state), unsafe_allow_html=True)


if submit and uploaded is not None:
    candidate = UploadCandidate.from_uploaded_file(uploaded)
    with st.spinner("🔍 Extracting skills with AI..."):
        outcome = submit_resume(
            st.session_state,
            candidate,
            on_change=show_panel,
            extract_kwargs={
                "provider": PROVIDER_KEYS[provider],
                "model": model,
            },
            mode=limits.mode,
            max_bytes=limits.max_bytes,
            allowed_types=limits.allowed_types,
        )

    if outcome is None:
        st.toast(f"❌ {st.session_state.error}")
    elif outcome.status is Status.SUCCESS:
        st.toast("✅ Skills extracted successfully.")
    elif outcome.status is Status.EMPTY:
        st.toast("⚠️ No skills found.")
        st.warning(st.session_state.notice)
    else:
        st.toast(f"❌ Extraction failed. {failure_hint(outcome.failure_kind)}")
else:
    show_panel(st.session_state)

import asyncio

import streamlit as st

from budgetkollen.config import get_settings
from budgetkollen.csv_codec import CsvImporter, export_to_csv_bytes
from budgetkollen.exceptions import CsvExportError
from ui.state import apply_imported_state, current_state


def session_importer() -> CsvImporter:
    """The importer owned by this browser session."""
    return st.session_state.setdefault("csv_importer", CsvImporter())


def render_export_import():
    """Sidebar download of the current state and upload of a saved file."""
    st.sidebar.header("Save / load")
    try:
        data = export_to_csv_bytes(current_state())
    except CsvExportError as exc:
        st.sidebar.error(str(exc))
    else:
        st.sidebar.download_button(
            "Export CSV", data=data, file_name=get_settings().csv_filename, mime="text/csv"
        )

    uploaded = st.sidebar.file_uploader("Import CSV", type=["csv"], key="import_csv")
    if uploaded is None:
        return
    # the uploader keeps its file across reruns; import each upload once
    if st.session_state.get("imported_file_id") == uploaded.file_id:
        return

    def on_success(state):
        apply_imported_state(state)
        st.session_state["imported_file_id"] = uploaded.file_id
        st.session_state.pop("import_error", None)

    def on_error(err):
        st.session_state["imported_file_id"] = uploaded.file_id
        st.session_state["import_error"] = str(err)

    asyncio.run(session_importer().import_from_csv(uploaded, on_success, on_error))
    if "import_error" in st.session_state:
        st.sidebar.error(st.session_state["import_error"])
    else:
        st.sidebar.success("Imported")

"""Semantic member search."""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import streamlit as st

from app.ai.search_client import SemanticSearchClient
from app.core.exceptions import SearchError

st.set_page_config(
    page_title="Search - Standup Tracker",
    page_icon="🔍",
    layout="wide",
)

st.title("🔍 Find people")


def main():
    query = st.text_input("Search by skills, role or description", placeholder="React developer")
    limit = st.slider("Results", min_value=1, max_value=50, value=10)

    if len(query.strip()) < 3:
        st.caption("Type at least 3 characters.")
        return

    try:
        results = SemanticSearchClient().search(query, limit=limit)
    except SearchError as e:
        st.error(f"Search failed: {e.message}")
        return

    if not results:
        st.info("No matching members.")
        return

    for result in results:
        with st.container(border=True):
            col1, col2 = st.columns([5, 1])
            with col1:
                st.subheader(result.name)
                caption = result.role or "-"
                if result.team:
                    caption += f" · {result.team.name}"
                st.caption(f"{caption} · {result.email or ''}")
                if result.highlighted_text:
                    st.markdown(result.highlighted_text, unsafe_allow_html=True)
                elif result.description:
                    st.write(result.description)
                if result.skills:
                    st.write(", ".join(result.skills))
            with col2:
                st.metric("Match", f"{result.similarity_score:.0%}")


if __name__ == "__main__":
    main()

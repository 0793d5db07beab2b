"""Main page - Standup Tracker dashboard."""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import streamlit as st
import pandas as pd
from datetime import datetime

from app.ui import queries


st.set_page_config(
    page_title="Standup Tracker",
    page_icon="🗓️",
    layout="wide",
)

st.title("STANDUP TRACKER")


def main():
    col1, col2 = st.columns([6, 1])
    with col2:
        if st.button("Refresh"):
            st.rerun()

    session = queries.get_session()

    try:
        # --- Metrics Row ---
        st.markdown("---")
        stats = queries.get_overview_stats(session)

        col_teams, col_members, col_today, col_search = st.columns(4)
        with col_teams:
            st.subheader("TEAMS")
            st.metric("Teams", stats["teams"])
        with col_members:
            st.subheader("MEMBERS")
            st.metric("Members", stats["members"])
        with col_today:
            st.subheader("TODAY")
            st.metric("Standups", stats["standups_today"])
            st.metric("On leave", stats["leaves_today"])
        with col_search:
            st.subheader("SEARCH")
            indexed = stats["members"] - stats["members_without_embedding"]
            st.metric("Searchable", f"{indexed}/{stats['members']}")
            pct = indexed / stats["members"] if stats["members"] > 0 else 0
            st.progress(min(pct, 1.0))

        # --- Team Overview ---
        st.markdown("---")
        st.subheader("TEAMS")

        team_sizes = queries.get_team_sizes(session)
        if team_sizes:
            team_df = pd.DataFrame(team_sizes)
            st.dataframe(
                team_df,
                width="stretch",
                hide_index=True,
                column_config={
                    "team": st.column_config.TextColumn("Team", width="medium"),
                    "members": st.column_config.NumberColumn("Members", width="small"),
                },
            )
        else:
            st.info("No teams yet.")

        if stats["members_without_embedding"]:
            st.warning(
                f"{stats['members_without_embedding']} members have no embedding and "
                "are only found by text search. Run scripts/backfill_embeddings.py."
            )

        st.caption(f"Last refresh: {datetime.now().strftime('%H:%M:%S')}")

    finally:
        session.close()


if __name__ == "__main__":
    main()

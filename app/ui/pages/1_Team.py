"""Team members: profiles, standups and leaves."""

import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(project_root))

import streamlit as st
from datetime import date

from app.core.container import get_container
from app.core.exceptions import StandupTrackerError
from app.services.leave_service import get_approved_leaves, leave_dates_in_month
from app.services.member_service import MemberService
from app.services.standup_service import get_recent_standups, get_standups_for_month
from app.ui import queries

st.set_page_config(
    page_title="Team - Standup Tracker",
    page_icon="👥",
    layout="wide",
)

st.title("👥 Team")


def render_member_card(member):
    with st.container(border=True):
        if member.profile_picture:
            st.image(member.profile_picture, width=80)
        st.subheader(member.name)
        role_text = member.role or "No role"
        if member.team:
            role_text += f" · {member.team.name}"
        st.caption(role_text)
        if member.skills:
            skills_text = ", ".join(member.skills[:5])
            if len(member.skills) > 5:
                skills_text += f" (+{len(member.skills) - 5})"
            st.write(skills_text)
        st.caption("✅ Searchable" if member.embedding is not None else "❌ No embedding")


def render_profile_editor(session, member):
    container = get_container()
    service = container.member_service(session)

    description = st.text_area("Description", member.description or "", height=120)
    if st.button("Save description"):
        try:
            service.update_description(member.id, description)
            st.success("Description saved")
        except StandupTrackerError as e:
            st.error(f"Error: {e.message}")

    skills_raw = st.text_input("Skills (comma separated)", ", ".join(member.skills or []))
    if st.button("Save skills"):
        try:
            service.update_skills(member.id, skills_raw.split(","))
            st.success("Skills saved")
        except StandupTrackerError as e:
            st.error(f"Error: {e.message}")

    upload = st.file_uploader("Profile picture", type=["jpg", "jpeg", "png"])
    if upload is not None and st.button("Upload picture"):
        pictures = container.profile_picture_service(session)
        try:
            result = pictures.upload(member.id, upload.name, upload.type, upload.getvalue())
            st.success(f"Uploaded: {result.public_url}")
        except StandupTrackerError as e:
            st.error(f"Error: {e.message}")


def render_activity(session, member):
    col_standups, col_leaves = st.columns(2)

    with col_standups:
        st.markdown("**Recent standups**")
        today = date.today()
        this_month = get_standups_for_month(session, member.id, today.year, today.month)
        st.caption(f"{len(this_month)} standup(s) this month")
        standups = get_recent_standups(session, member.id)
        if not standups:
            st.info("No standups yet.")
        for standup in standups:
            with st.expander(standup.date.strftime("%B %d, %Y")):
                for task in standup.tasks:
                    st.checkbox(task.text, value=task.completed, disabled=True, key=task.id)
                if standup.blockers:
                    st.warning(f"Blocker: {standup.blockers}")

    with col_leaves:
        st.markdown("**Approved leaves**")
        leaves = get_approved_leaves(session, member.id)
        leave_days = leave_dates_in_month(leaves, today.year, today.month)
        st.caption(f"{len(leave_days)} day(s) this month")
        for leave in leaves:
            st.write(f"{leave.date:%Y-%m-%d} · {leave.type} · {leave.reason or '-'}")


def main():
    session = queries.get_session()

    try:
        teams = queries.get_teams(session)
        team_names = {None: "All teams"}
        team_names.update({t.id: t.name for t in teams})
        team_id = st.selectbox(
            "Team", list(team_names.keys()), format_func=lambda x: team_names[x]
        )

        members = MemberService(session).list_members(team_id=team_id)
        if not members:
            st.info("No members found.")
            return

        st.caption(f"{len(members)} members")
        cols = st.columns(3)
        for i, member in enumerate(members):
            with cols[i % 3]:
                render_member_card(member)

        # --- Detail View ---
        st.markdown("---")
        st.subheader("Details")

        member_names = {m.id: m.name for m in members}
        selected_id = st.selectbox(
            "Select member",
            list(member_names.keys()),
            format_func=lambda x: member_names.get(x, str(x)),
        )
        if selected_id:
            member = MemberService(session).get_member(selected_id)
            st.markdown(f"**Email:** {member.email}")
            render_profile_editor(session, member)
            st.markdown("---")
            render_activity(session, member)

    finally:
        session.close()


if __name__ == "__main__":
    main()

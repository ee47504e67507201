"""Streamlit auth page: register, log in, view the profile, log out."""
from __future__ import annotations

import streamlit as st

from flixauth_client.api_client import APIClient, APIError
from flixauth_client.config import BACKEND_BASE_URL
from flixauth_client.session import AuthSession
from flixauth_client.state import StreamlitTokenStorage, init_session_state


def get_session_client() -> APIClient:
    if st.session_state.api_client is None:
        session = AuthSession(StreamlitTokenStorage())
        st.session_state.api_client = APIClient(session=session, base_url=BACKEND_BASE_URL)
    return st.session_state.api_client


def render_auth(client: APIClient) -> None:
    st.header("Sign in")
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Register")
        with st.form("register_form"):
            reg_user_id = st.text_input("User ID", key="reg_user_id")
            reg_username = st.text_input("Username", key="reg_username")
            reg_email = st.text_input("Email", key="reg_email")
            reg_phone = st.text_input("Phone number (optional)", key="reg_phone")
            reg_pass = st.text_input("Password", type="password", key="reg_pass")
            submitted = st.form_submit_button("Register")
            if submitted:
                try:
                    res = client.register(reg_user_id, reg_username, reg_email, reg_pass, reg_phone or None)
                    st.success(res.get("message", "Registered"))
                    st.rerun()
                except APIError as e:
                    st.error(e.message)

    with col2:
        st.subheader("Login")
        with st.form("login_form"):
            login_user = st.text_input("Username", key="login_user")
            login_pass = st.text_input("Password", type="password", key="login_pass")
            submitted = st.form_submit_button("Login")
            if submitted:
                try:
                    client.login(login_user, login_pass)
                    st.rerun()
                except APIError as e:
                    st.error(e.message)


def render_profile(client: APIClient) -> None:
    display = client.current_user()
    st.header(f"Welcome, {display.username if display else 'user'}")
    try:
        user = client.get_profile().get("user", {})
    except APIError as e:
        if e.status_code in (401, 403):
            # Stored token expired or was rejected.
            client.logout()
            st.warning("Your session has ended, please log in again.")
            st.rerun()
        st.error(e.message)
        return

    st.json(user)
    if st.button("Logout"):
        client.logout()
        st.rerun()


def render_sidebar(client: APIClient) -> None:
    st.sidebar.caption(f"Backend: {client.base_url}")
    if st.sidebar.button("Test database"):
        try:
            st.sidebar.success(client.test_database().get("message", "ok"))
        except APIError as e:
            st.sidebar.error(e.message)


def main() -> None:
    st.set_page_config(page_title="flixauth", layout="centered")
    init_session_state()
    client = get_session_client()
    render_sidebar(client)
    if client.is_authenticated:
        render_profile(client)
    else:
        render_auth(client)


if __name__ == "__main__":
    main()

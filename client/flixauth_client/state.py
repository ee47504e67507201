"""Session state helpers for Streamlit."""
from __future__ import annotations

from typing import Optional

import streamlit as st

TOKEN_KEY = "jwt_token"


def init_session_state() -> None:
    defaults = {
        TOKEN_KEY: None,
        "api_client": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


class StreamlitTokenStorage:
    """Keeps the token in ``st.session_state`` for the lifetime of the browser tab."""

    def __init__(self, key: str = TOKEN_KEY) -> None:
        self.key = key

    def load(self) -> Optional[str]:
        return st.session_state.get(self.key)

    def save(self, token: str) -> None:
        st.session_state[self.key] = token

    def clear(self) -> None:
        st.session_state[self.key] = None

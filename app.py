import streamlit as st
from pydantic import ValidationError

from projecthub import auth
from projecthub.errors import ApiError
from projecthub.schemas import SignupRequest, validation_messages
from projecthub.session import is_logged_in
from projecthub.theme import set_theme
from projecthub.ui import anonymous_client

set_theme(page_title="ProjectHub · Sign in", page_icon="🔐", layout="centered")

if is_logged_in(st.session_state):
    st.switch_page("pages/1_Dashboard.py")

st.title("Project Management")

flash = st.session_state.pop("flash", None)
if flash:
    st.warning(flash)

login_tab, register_tab = st.tabs(["Sign in", "Register"])

with login_tab:
    with st.form("login-form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Login", use_container_width=True)
    if submitted:
        try:
            auth.login_into(st.session_state, anonymous_client(), username, password)
        except ValidationError as exc:
            for msg in validation_messages(exc):
                st.error(msg)
        except ApiError as exc:
            st.error(exc.message)
        else:
            st.switch_page("pages/1_Dashboard.py")

with register_tab:
    with st.form("register-form", clear_on_submit=False):
        r_username = st.text_input("Username", key="reg-username")
        r_email = st.text_input("Email", key="reg-email")
        r_full_name = st.text_input("Full name", key="reg-full-name")
        r_password = st.text_input("Password", type="password", key="reg-password")
        r_confirm = st.text_input("Confirm Password", type="password", key="reg-confirm")
        registered = st.form_submit_button("Sign Up", use_container_width=True)
    if registered:
        try:
            request = SignupRequest(
                username=r_username,
                email=r_email,
                full_name=r_full_name,
                password=r_password,
                confirm_password=r_confirm,
            )
            message = auth.register(anonymous_client(), request)
        except ValidationError as exc:
            for msg in validation_messages(exc):
                st.error(msg)
        except ApiError as exc:
            st.error(exc.message)
        else:
            st.success(f"{message} You can now sign in.")

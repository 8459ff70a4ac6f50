import os

import requests
import streamlit as st

API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000")

st.set_page_config(page_title="Document Q&A", layout="centered")

st.title("Document Q&A")
st.write("Upload a PDF, Markdown, HTML or text file and ask questions about its content.")

st.sidebar.header("Current Document")

try:
    response = requests.get(f"{API_BASE}/document", timeout=10)
    if response.status_code == 200:
        doc = response.json()
        st.sidebar.metric("Size (KB)", f"{doc['size'] / 1024:.1f}")
        st.sidebar.metric("Characters", doc["characters"])
        st.sidebar.write(f"**{doc['filename']}**")
        st.sidebar.write(f"ID: {doc['document_id']}")
        st.sidebar.write(f"Uploaded: {doc['upload_timestamp'][:19]}")
        current_document = doc
    elif response.status_code == 404:
        st.sidebar.info("No document uploaded yet")
        current_document = None
    else:
        st.sidebar.error("Cannot connect to API")
        current_document = None
except requests.RequestException as e:
    st.sidebar.error(f"API Error: {str(e)}")
    current_document = None

try:
    health = requests.get(f"{API_BASE}/health", timeout=10).json()
    if health.get("demo_mode"):
        st.sidebar.warning("Demo mode: answers are canned responses")
except requests.RequestException:
    pass

st.sidebar.divider()

st.header("Upload Document")

uploaded_file = st.file_uploader("Choose a file", type=["pdf", "txt", "md", "html"])

if uploaded_file:
    col1, col2 = st.columns([3, 1])

    with col1:
        st.write(f"Selected: {uploaded_file.name}")
        st.write(f"Size: {uploaded_file.size / 1024:.2f} KB")

    with col2:
        if st.button("Upload", type="primary", use_container_width=True):
            with st.spinner("Reading document..."):
                try:
                    files = {
                        "file": (uploaded_file.name, uploaded_file.getvalue(), uploaded_file.type)
                    }
                    response = requests.post(f"{API_BASE}/upload", files=files, timeout=60)

                    if response.status_code == 200:
                        result = response.json()
                        st.success(f"{result['filename']} is ready for Q&A")
                        st.rerun()
                    else:
                        error = response.json()
                        st.error(f"Processing failed: {error.get('detail', 'Unknown error')}")
                except requests.RequestException as e:
                    st.error(f"Error: {str(e)}")

st.divider()

st.header("Chat")

if current_document is None:
    st.info("Please upload a document first")
else:
    try:
        log = requests.get(f"{API_BASE}/messages", timeout=10).json()
        for message in log["messages"]:
            with st.chat_message(message["role"]):
                if message.get("error_kind"):
                    st.error(message["content"])
                else:
                    st.markdown(message["content"])
    except requests.RequestException as e:
        st.error(f"API Error: {str(e)}")

    question = st.chat_input(f"Ask about {current_document['filename']}")

    if question:
        with st.spinner("Thinking..."):
            try:
                response = requests.post(
                    f"{API_BASE}/ask",
                    json={"question": question},
                    timeout=120,
                )
                if response.status_code != 200:
                    error = response.json()
                    st.error(f"Error: {error.get('detail', 'Unknown error')}")
                else:
                    st.rerun()
            except requests.RequestException as e:
                st.error(f"Error: {str(e)}")

st.divider()
st.caption("Documents are held in memory only; answers come from the configured Gemini model")

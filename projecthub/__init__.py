"""ProjectHub - Streamlit client for the project-management backend.

- ``metrics``: summary statistics, status histograms, task filtering/sorting
- ``api_client``: HTTP client for the backend's REST API
- ``loaders``: all-or-nothing concurrent fetches for each page
"""

__version__ = "0.1.0"

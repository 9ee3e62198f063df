"""UHI Explorer web application."""

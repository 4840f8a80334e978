"""Streamlit entry point: ``streamlit run app.py``."""

from prompt_kiosk.ui import main

if __name__ == "__main__":
    main()

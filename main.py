# main.py
from rental_quotes.main import create_app

app = create_app()

# wsgi.py
import os

from tagsign.main import create_app

app = create_app()

# Local run: python wsgi.py
if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5001")))

# backend/wsgi.py
# FLASK_APP=wsgi.py; requires JWT_SECRET in the environment.
from stockroom import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=app.config["PORT"])

"""Local development entrypoint.

Exposes ``app`` for platforms that look for it in ``main.py`` without
shadowing the ``lotto_hub`` package.
"""

from lotto_hub import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=8000, debug=False)

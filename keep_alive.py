from flask import Flask, jsonify
from threading import Thread
import logging

import config

# Disable Flask logging to keep console clean
log = logging.getLogger('werkzeug')
log.setLevel(logging.ERROR)

app = Flask('daily_coder_hub')


@app.route('/')
def home():
    return "Daily Coder Hub is alive!"


@app.route('/health')
def health():
    return jsonify(status="ok", date=config.today().isoformat(), timezone=config.TIMEZONE)


def run():
    # Render assigns a port in the PORT env var
    app.run(host='0.0.0.0', port=config.KEEP_ALIVE_PORT)


def keep_alive():
    t = Thread(target=run, daemon=True)
    t.start()

import os

import gunicorn.app.base
import yaml

from app import create_app


class GunicornApp(gunicorn.app.base.BaseApplication):
    def __init__(self, app, options=None):
        self.options = options or {}
        self.application = app
        super().__init__()

    def load_config(self):
        for key, value in self.options.items():
            self.cfg.set(key, value)

    def load(self):
        return self.application


if __name__ == "__main__":
    # Load config.yaml from the local directory
    config_file = os.path.join(os.path.dirname(__file__), "config.yaml")

    if os.path.exists(config_file):
        with open(config_file) as file:
            config_data = yaml.safe_load(file) or {}
    else:
        raise FileNotFoundError("config.yaml not found in the local directory.")

    if "log_level" not in config_data:
        raise ValueError("log_level must be specified in config.yaml")

    # Each dashboard polls once a second; threads keep overlapping polls from queueing
    options = {
        "bind": f"0.0.0.0:{config_data.get('port', 8080)}",
        "workers": config_data.get("workers", 1),
        "threads": config_data.get("threads", 4),
        "loglevel": config_data["log_level"],
        "errorlog": config_data.get("log_file", "-"),
    }

    GunicornApp(create_app(config_file), options).run()

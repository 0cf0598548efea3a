"""Run the attendance API on http://localhost:5000."""

from __future__ import annotations

import atexit
import os

from src.class_attendance.class_attendance.core.constants import DEFAULT_PORT
from src.class_attendance.class_attendance.main import create_app

app = create_app()

# The connection factory is opened in create_app; close it on shutdown.
atexit.register(app.extensions["class_attendance"].conn.close)


if __name__ == "__main__":
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", DEFAULT_PORT)))

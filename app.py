import os

from src.classroom_attendance.classroom_attendance.main import create_app

app = create_app()

if __name__ == "__main__":
    # threaded: each WebSocket holds its own worker
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3000")), debug=app.config["DEBUG"], threaded=True)

"""Main entry point: serves the reference ingestion sink."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from pagewatch.api import create_fastapi_app
from pagewatch.config import sink_host, sink_port
from pagewatch.logging_config import setup_logging
from sim import Sim


def main():
    """Run the sink."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    host = sink_host()
    port = sink_port()

    # SIM reports back to this very sink
    sim = Sim(api_url=f"http://{host}:{port}")

    from pagewatch.api.routes import control
    control.set_sim_instance(sim)

    app = create_fastapi_app()

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level="info",
        log_config=None,
    )


if __name__ == "__main__":
    main()

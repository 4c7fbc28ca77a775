import logging

import uvicorn

from nutriplan.api.api_run import app
from nutriplan.utilities.config import API_BASE_URL, APP_HOST, APP_PORT, LOG_LEVEL


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # Print a friendly message that points to the URL you can open in a browser
    print(f"Meal plan calendar on http://{APP_HOST}:{APP_PORT} (Press CTRL+C to quit)")
    print(f"Using meal-plan API at {API_BASE_URL}")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT, log_level=LOG_LEVEL.lower())

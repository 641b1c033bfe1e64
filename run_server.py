import uvicorn
from dotenv import load_dotenv

from eventgate.config import load_config

# Load environment variables
load_dotenv()


def main():
    config = load_config()

    uvicorn.run(
        "eventgate.main:create_app",
        factory=True,
        host=config.api_host,
        port=config.api_port,
        reload=False,
    )


if __name__ == "__main__":
    main()

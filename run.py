import os

from dotenv import load_dotenv

load_dotenv()

from shipdesc import create_app  # noqa: E402
from shipdesc.config import DevelopmentConfig, ProductionConfig  # noqa: E402

app = create_app(DevelopmentConfig if os.getenv('FLASK_DEBUG', '1') == '1' else ProductionConfig)


def main():
    app.run(
        host=os.getenv('FLASK_RUN_HOST', '0.0.0.0'),
        port=int(os.getenv('PORT', os.getenv('FLASK_RUN_PORT', 5000))),
        debug=os.getenv('FLASK_DEBUG', '1') == '1'
    )


if __name__ == '__main__':
    main()

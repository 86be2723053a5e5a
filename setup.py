from setuptools import setup, find_packages

setup(
    name="shipdesc",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        "shipdesc": ["templates/*.html", "templates/*/*.html", "static/css/*.css", "static/js/*.js"],
    },
    python_requires=">=3.10",
    install_requires=[
        'flask',
        'flask-sqlalchemy',
        'flask-login',
        'flask-wtf',
        'flask-migrate',
        'flask-babel>=3.0',
        'python-dotenv',
        'werkzeug',
        'beautifulsoup4>=4.12',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
)

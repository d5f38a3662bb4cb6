from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="clueapi",
    version="0.1.0",
    author="Clue Analytics",
    author_email="support@clueanalytics.com",
    description="Flask backend for the Clue Analytics site: feed proxy, newsletter, contact form and admin listings",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/jinka97/clue-analytics",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Framework :: Flask",
    ],
    python_requires=">=3.9",
    install_requires=[
        "Flask>=3.0.0",
        "Flask-CORS>=4.0.0",
        "Flask-Limiter>=3.5.0",
        "Flask-Caching>=2.1.0",
        "python-dotenv>=1.0.0",
        "requests>=2.28.0",
        "resend>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-flask>=1.2",
            "black>=22.0",
            "flake8>=5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "clueapi-server=clueapi.server:main",
        ],
    },
    zip_safe=False,
)

from setuptools import setup, find_packages

setup(
    name="promptify",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=[
        "requests>=2.31.0",
        "pyyaml>=6.0.1",
        "python-dotenv>=1.0.0",
        "pytz>=2023.3",
        "pyperclip>=1.8.2",
        "keyboard>=0.13.5",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "pytest-asyncio>=0.21.1",
        ],
    },
    entry_points={
        "console_scripts": [
            "promptify=main:main",
        ],
    },
    python_requires=">=3.10",
    author="Promptify Contributors",
    description="Enhance prompts from the clipboard with reusable presets and a local LLM",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)

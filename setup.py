import os
import subprocess

import setuptools

_DEFAULT_VERSION = "0.1.0"


def run(*cmd):
    wd = os.path.dirname(os.path.abspath(__file__))
    p = subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.DEVNULL, cwd=wd, text=True)
    if p.returncode != 0:
        raise RuntimeError(f"command {cmd!r} exited with {p.returncode}")
    return p.stdout.rstrip()


def version():
    # git hashes aren't valid PEP 440 versions on their own, use them as a local label
    try:
        rev = run("git", "rev-parse", "--short=8", "HEAD")
    except (OSError, RuntimeError):
        return _DEFAULT_VERSION
    return f"{_DEFAULT_VERSION}+g{rev}" if rev else _DEFAULT_VERSION


setuptools.setup(
    name="nft_swap",
    version=version(),
    description="Peer-to-peer NFT-for-ERC20 swap over the 0x v4 ExchangeProxy",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    package_data={"nft_swap": ["resources/*.json"]},
    python_requires=">=3.10",
    install_requires=[
        "web3>=7.0",
        "eth-account>=0.13",
        "aiohttp>=3.9.0",
        "pydantic>=2.0",
        "python-dotenv>=1.0",
        "orjson>=3.9",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.24",
            "pytest-aiohttp>=1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "nft-swap=nft_swap.main:main",
        ],
    },
)

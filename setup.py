import ast
import re
from setuptools import setup


def ensure_one_level_of_quotes(text):
    # Converts '"foo"' to 'foo'
    return str(ast.literal_eval(text))


def get_version():
    """ Based on the functionality in pallets/click's setup.py
    (https://github.com/pallets/click/blob/master/setup.py) """
    _version_re = re.compile(r'__version__\s+=\s+(.*)')
    with open('sheetcrud/__init__.py', 'rb') as f:
        lines = f.read().decode('utf-8')
        version = ensure_one_level_of_quotes(_version_re.search(lines).group(1))
        return version


required = [
    'pandas',
    'numpy',
    'google-api-python-client>=2.0.0',
    'google-auth>=1.24.0',
    'google-auth-httplib2>=0.1.0',  # authorizes the httplib2 transport used by google-api-python-client
    'httplib2>=0.19.0',
]

extras = {
    'test': [
        'pytest',
        'pytest-mock',
    ],
}

setup(
    name='sheetcrud',
    description='Row-level create, read, update and delete on a Google Sheets tab from Python',
    version=get_version(),
    packages=['sheetcrud'],
    install_requires=required,
    extras_require=extras,
    python_requires='>=3.8',
    license='MIT',
    classifiers=[
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
    ],
)

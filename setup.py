"""Install the identity server."""

from setuptools import setup, find_packages

setup(
    name='identity-server',
    version='0.1.0',
    packages=find_packages(include=['identity_server', 'identity_server.*'],
                           exclude=['*tests*']),
    include_package_data=True,
    package_data={'identity_server': ['templates/*.html',
                                      'templates/*/*.html']},
    install_requires=[
        "flask",
        "flask-login",
        "flask-sqlalchemy",
        "sqlalchemy",
        "wtforms",
        "flask-wtf",
        "email-validator",
        "itsdangerous",
        "werkzeug",
        "markupsafe",
        "pytz",
        "python-json-logger"
    ],
    extras_require={
        'test': ['pytest']
    },
    zip_safe=False
)

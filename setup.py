from setuptools import find_packages
from setuptools import setup

version = '1.0.0.dev0'

install_requires = [
    'acme>=2.0.0',
    'certbot>=2.0.0',
    'kubernetes>=24.2.0',
    'requests>=2.20.0',
]

test_extras = [
    'pytest',
    'requests-mock',
]

setup(
    name='certbot-dns-technitium',
    version=version,
    description="Technitium DNS Server Authenticator plugin for Certbot",
    author="certbot-dns-technitium contributors",
    license='Apache License 2.0',
    python_requires='>=3.9.2',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Environment :: Plugins',
        'Intended Audience :: System Administrators',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Security',
        'Topic :: System :: Installation/Setup',
        'Topic :: System :: Networking',
        'Topic :: System :: Systems Administration',
        'Topic :: Utilities',
    ],

    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    include_package_data=True,
    install_requires=install_requires,
    extras_require={
        'test': test_extras,
    },
    entry_points={
        'certbot.plugins': [
            'dns-technitium = certbot_dns_technitium._internal.dns_technitium:Authenticator',
        ],
    },
)

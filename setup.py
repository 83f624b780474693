from setuptools import setup, find_packages
import os


def _get_long_description():
    """Get long description from README file with fallback"""
    readme_files = ['README.md', 'docs/README.md']
    for readme_file in readme_files:
        if os.path.exists(readme_file):
            try:
                with open(readme_file, 'r', encoding='utf-8') as f:
                    return f.read()
            except OSError:
                continue
    return 'Age-gating HTTP service backed by AWS Rekognition face detection'


setup(
    name='unface_age',
    version='1.0.0',
    author='Unface Team',
    description='Age-gating HTTP service backed by AWS Rekognition face detection',
    long_description=_get_long_description(),
    long_description_content_type='text/markdown',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    install_requires=[
        # Web framework
        'flask>=2.3,<4.0',
        'flask-cors>=4.0,<7.0',

        # Face detection provider
        'boto3>=1.28,<2.0',
        'botocore>=1.31,<2.0',

        # Configuration and utilities
        'pyyaml>=6.0,<7.0',
        'python-dotenv>=1.0,<2.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.4',
            'pytest-cov>=4.1',
            'black>=23.7',
            'isort>=5.12',
        ],
    },
    python_requires='>=3.8',
    zip_safe=False,
)

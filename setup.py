from setuptools import setup
import os

PROJECT_ROOT, _ = os.path.split(__file__)
PROJECT_AUTHORS = 'jenkins-remote developers'
REVISION = '0.1.0'
PROJECT_NAME = 'jenkins-remote'
SHORT_DESCRIPTION = (
    'Jenkins remote API client returning typed results: jobs, builds, the '
    'build queue, console output, artifacts and XML job/view configuration.'
)


def read_requirements(name):
    with open(os.path.join(PROJECT_ROOT, name)) as f:
        return [line.strip() for line in f
                if line.strip() and not line.startswith('#')]


try:
    DESCRIPTION = open(os.path.join(PROJECT_ROOT, 'README.rst')).read()
except IOError:
    DESCRIPTION = SHORT_DESCRIPTION


setup(
    name=PROJECT_NAME.lower(),
    version=REVISION,
    author=PROJECT_AUTHORS,
    packages=[
        'jenkins_remote'],
    zip_safe=True,
    include_package_data=False,
    python_requires='>=3.8',
    install_requires=read_requirements('requirements.txt'),
    extras_require={
        'test': read_requirements('test-requirements.txt'),
    },
    description=SHORT_DESCRIPTION,
    long_description=DESCRIPTION,
    license='BSD',
    classifiers=[
        'Topic :: Utilities',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'Intended Audience :: System Administrators',
        'Environment :: Console',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
)

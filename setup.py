from setuptools import setup, find_packages

setup(
    name='pick-pad',
    version='0.1.0',
    description='Screen layout engine for terminal line selectors: paging, highlighting and status bar',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'toml>=0.10.2',
        'wcwidth>=0.2.6',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    include_package_data=True,
    package_data={'pick_pad': ['config.toml']},
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python :: 3.11',
    ],
    python_requires='>=3.11',
    license='GPLv3',
)

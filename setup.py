from setuptools import setup

with open('README.md', 'r') as f:
    long_description = f.read()

with open('LICENSE', 'r') as f:
    lic = f.read()

with open('requirements.txt') as f:
    requirements = f.read().splitlines()

setup(
    name='mhbayes',
    version='0.1.0',
    keywords=['Bayes theorem',
              'statistics',
              'MCMC',
              'Metropolis-Hastings'],
    description='Bayes medical test calculator and 1D Metropolis-Hastings sampler.',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license=lic,
    packages=['mhbayes', 'mhbayes.samplers'],
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Intended Audience :: Science/Research',
        'Intended Audience :: Education',
        'Topic :: Scientific/Engineering :: Mathematics'
    ],
    python_requires='>=3.9',
    install_requires=requirements,
    extras_require={'test': ['pytest']}
)

#!/usr/bin/python3
"""flvreader
=========

A library for reading FLV files tag by tag.

Decodes the file header, then every audio, video and script data tag in
order, including the codec sub-headers (AAC packet type, AVC packet header,
VP6 adjustment) and the AMF0 encoded metadata of script tags, which comes out
as plain Python values.

Example usage
-------------

**Reading tags**

::

    from flvreader.tags import FLV

    with FLV.open('file.flv') as flv:
        for tag in flv.iter_tags():
            print(tag)

**Using handlers**

::

    FLV(open('file.flv', 'rb'), on_script=lambda tag: print(tag.variable)).parse()

**Printing FLV file information**

::

    $ debug-flv file.flv | head -5
    === "file.flv" ===
    #00001 <ScriptTag b'onMetaData' at offset 0x0000000D, time 0, size 259>
    {b'duration': 9.979000000000001, b'width': 640.0, b'height': 360.0}
    #00002 <AudioTag at offset 0x0000011F, time 0, size 7, AAC, sequence header>
    #00003 <VideoTag at offset 0x00000135, time 0, size 46, AVC (keyframe), sequence header>

"""

from setuptools import setup
from flvreader import __version__

setup(
    name='flvreader',
    version=__version__,
    description='Reading FLV files and their AMF0 metadata, tag by tag',
    long_description=__doc__,
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ],
    platforms=['any'],
    license='MIT',
    python_requires='>=3.6',
    packages=['flvreader', 'flvreader.scripts'],
    install_requires=[
        'coloredlogs',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'debug-flv=flvreader.scripts.debug_flv:main',
        ]
    }
)

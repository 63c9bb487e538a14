"""
Setup script for Nightscout Tray.

Usage:
    pip install -e .            # development install
    python setup.py py2app      # build the macOS application bundle

The py2app bundle will be in the 'dist' folder.
"""
import glob
import sys

from setuptools import setup

APP = ['nightscout_tray.py']

# Assets are not checked in; run scripts/create_arrow_icons.py before building
DATA_FILES = [
    (folder, files)
    for folder, files in (
        ('assets/arrows', sorted(glob.glob('assets/arrows/*.ico'))),
        ('assets/fonts', sorted(glob.glob('assets/fonts/*.p*'))),
    )
    if files
]

OPTIONS = {
    'argv_emulation': False,
    'plist': {
        'CFBundleName': 'Nightscout Tray',
        'CFBundleDisplayName': 'Nightscout Tray',
        'CFBundleIdentifier': 'com.nightscouttray.app',
        'CFBundleVersion': '1.0.0',
        'CFBundleShortVersionString': '1.0.0',
        'LSMinimumSystemVersion': '10.14.0',
        'LSUIElement': True,  # Hide dock icon (menu bar app)
        'NSHighResolutionCapable': True,
    },
    'packages': [
        # Our packages
        'nightscout',
        'storage',
        'config',
        'app',
    ],
    'includes': [
        'rumps',
        'PIL',
        'PIL.Image',
        'PIL.ImageDraw',
        'PIL.ImageFont',
        'objc',
        'Foundation',
        'AppKit',
    ],
    'excludes': [
        'tkinter',
        'pytest',
        'pystray',
        'pip',
    ],
    'site_packages': True,
}

extra = {}
if 'py2app' in sys.argv:
    extra = dict(
        app=APP,
        data_files=DATA_FILES,
        options={'py2app': OPTIONS},
        setup_requires=['py2app'],
    )

setup(
    name='nightscout-tray',
    version='1.0.0',
    description='Menu bar / system tray display of the latest Nightscout glucose reading',
    python_requires='>=3.8',
    packages=[
        'app',
        'app.views',
        'config',
        'nightscout',
        'storage',
    ],
    py_modules=['nightscout_tray'],
    install_requires=[
        'Pillow>=10.1',
        'rumps>=0.4.0; sys_platform == "darwin"',
        'pyobjc-framework-Cocoa>=9.0; sys_platform == "darwin"',
        'pystray>=0.19; sys_platform != "darwin"',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'gui_scripts': ['nightscout-tray = nightscout_tray:main'],
    },
    **extra,
)

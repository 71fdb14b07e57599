# build.py
import PyInstaller.__main__
import os
import sys

# Streamlit + plotly imports recurse deeply during analysis
sys.setrecursionlimit(5000)

SOURCES = [
    'app.py', 'views.py', 'config.py', 'database.py', 'query.py',
    'commands.py', 'bulk_ops.py', 'log_config.py',
]

if __name__ == '__main__':
    PyInstaller.__main__.run([
        'run_app.py',
        '--name=Asset_Inventory_Dashboard',
        '--onefile',
        '--clean',

        # Source files are read by streamlit at runtime, not imported by run_app
        *[f'--add-data={src}{os.pathsep}.' for src in SOURCES],

        # Collect heavy libraries
        '--collect-all=streamlit',
        '--collect-all=altair',
        '--collect-all=pandas',
        '--collect-all=plotly',
        '--collect-all=sqlalchemy',
        '--collect-all=openpyxl',

        # Streamlit reads package metadata at startup
        '--copy-metadata=streamlit',
        '--copy-metadata=tqdm',
        '--copy-metadata=requests',
        '--copy-metadata=packaging',

        '--exclude-module=pytest',
    ])

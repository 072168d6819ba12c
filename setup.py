#!/usr/bin/env python3
from __future__ import annotations

import re
import os
import setuptools
import pathlib
import sys
import toml

__minver__ = '3.9'
__github__ = 'https://github.com/resxt/resxt/'
__gitraw__ = 'https://raw.githubusercontent.com/resxt/resxt/'
__author__ = 'The resxt authors'
__slogan__ = 'Extract files from flat, dot-delimited application bundle resources.'
__topics__ = [
    'Development Status :: 4 - Beta',
    'Framework :: AsyncIO',
    'Operating System :: OS Independent',
    'Programming Language :: Python :: 3 :: Only',
    'Topic :: Software Development :: Libraries',
    'Topic :: System :: Archiving',
]


class DeployCommand(setuptools.Command):
    description = 'Tag and push new release.'
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    @staticmethod
    def main():
        import subprocess
        import shlex
        import resxt

        from pathlib import Path

        DEVNULL = open(os.devnull, 'wb')

        def run(cmd):
            print(F'run: {cmd}')
            return subprocess.check_call(
                shlex.split(cmd),
                stdout=DEVNULL,
                stderr=DEVNULL,
                cwd=os.getcwd(),
            )

        root = Path(resxt.__file__).parent.parent
        os.chdir(root)

        try:
            run(F'git tag {resxt.__version__}')
            run(R'git push')
            run(R'git push --tags')
        except subprocess.CalledProcessError as E:
            print(F'error: {E!s}')
            return 1
        else:
            return 0

    def run(self):
        sys.exit(self.main())


def get_config():
    here = pathlib.Path(__file__).parent.absolute()
    sys.path.insert(0, str(here))

    import resxt

    def get_setup_readme(filename: str | pathlib.Path | None = None):
        if filename is None:
            filename = here.joinpath('README.md')
        try:
            README = open(filename, 'r', encoding='UTF8')
        except FileNotFoundError:
            return resxt.__doc__
        with README:
            def complete_link(match):
                link: str = match[1]
                if any(link.lower().endswith(xt) for xt in ('jpg', 'gif', 'png', 'svg')):
                    return F'({__gitraw__}master/{link})'
                else:
                    return F'({__github__}blob/master/{link})'
            readme = README.read()
            return re.sub(R'(?<=\])\((?!\w+://)(.*?)\)', complete_link, readme)

    ppcfg: dict[str, dict[str, list[str]]] = toml.load(here.joinpath('pyproject.toml'))
    requirements = [
        r for r in ppcfg['build-system']['requires'] if not r.startswith(('setuptools', 'toml'))]

    return dict(
        name=resxt.__distribution__,
        version=resxt.__version__,
        long_description=get_setup_readme(),
        author=__author__,
        description=__slogan__,
        long_description_content_type='text/markdown',
        url=__github__,
        python_requires=F'>={__minver__}',
        classifiers=__topics__,
        packages=setuptools.find_packages(include=('resxt*',)),
        install_requires=requirements,
        extras_require={'dev': ['flake8']},
        cmdclass={'deploy': DeployCommand},
    )


if __name__ == '__main__':
    setuptools.setup(**get_config())

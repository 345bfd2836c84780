# setup.py
from setuptools import setup, Extension
from Cython.Build import cythonize
import os

# The substitution engine is pure Python; Cython compiles it in place so the
# rename/substitute tree walks run as C. The .py file stays importable.
py_path = os.path.join("dictscheme", "evaluation", "substitution.py")

setup(
    ext_modules=cythonize(
        Extension(
            name="dictscheme.evaluation.substitution",  # module path for import
            sources=[py_path],
        ),
        compiler_directives={'language_level': "3", "annotation_typing": False},
    ),
    zip_safe=False,
)

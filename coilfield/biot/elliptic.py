"""
Complete elliptic integrals for compiled field kernels.

scipy's ufuncs can not be called from nopython code. The scalar Cython
implementations exported by scipy.special.cython_special are bound as C
function pointers so that field kernels may call them without the GIL.
"""

import ctypes

import numba
from numba.extending import get_cython_function_address

ellip_type = ctypes.CFUNCTYPE(ctypes.c_double, ctypes.c_double)

_ellipk = ellip_type(
    get_cython_function_address("scipy.special.cython_special", "ellipk")
)
_ellipe = ellip_type(
    get_cython_function_address("scipy.special.cython_special", "ellipe")
)


@numba.njit(nogil=True)
def ellipk(m):
    """Return complete elliptic intergral of the 1st kind, parameter m=k**2."""
    return _ellipk(m)


@numba.njit(nogil=True)
def ellipe(m):
    """Return complete elliptic intergral of the 2nd kind, parameter m=k**2."""
    return _ellipe(m)

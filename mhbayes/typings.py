"""
Convenient JAX typings.
"""
import jax
from typing import Union

# The aliases are exactly the same jax.Array. We differ them only semantically.
JArray = jax.Array
JFloat = jax.Array
JBool = jax.Array
JKey = jax.Array

FloatScalar = Union[float, JFloat]
BoolScalar = Union[bool, JBool]

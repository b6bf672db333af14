"""
scikit-rca
==========

scikit-rca implements Relevant Component Analysis (RCA), a metric learning method
that learns a linear transformation of feature space from weak supervision given as
small groups of equivalent points ("chunklets"). It follows the `scikit-learn
<https://scikit.org/>`_ API and coding guidelines to promote usability and
interoperability with existing workflows.
"""

from ._version import __version__  # noqa: F401

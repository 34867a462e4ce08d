import numpy as np


def project_extremities(meas, exp):
    """
    Re-derives the endpoints of a matched segment from the predicted endpoints.

    The tracker finds the supporting line reliably but not where the segment
    ends (occlusion, endpoint drift). Each predicted endpoint P is placed on
    the measured line L1-L2 at

        u = ((P.x - L1.x) + (L2.x - L1.x) + (P.y - L1.y) + (L2.y - L1.y)) / |L1 - L2|_1^2
        new = L1 + u * (L2 - L1)

    so the first predicted endpoint always yields the first corrected one.

    Args:
        meas: Measured segment (L1.x, L1.y, L2.x, L2.y).
        exp: Predicted segment (P1.x, P1.y, P2.x, P2.y).

    Returns:
        New 4-vector with the corrected endpoints. The measured endpoints are
        returned unchanged when L1 == L2.
    """
    meas = np.asarray(meas, dtype=float).reshape(4)
    exp = np.asarray(exp, dtype=float).reshape(4)

    L1, L2 = meas[0:2], meas[2:4]
    den = np.sum(np.abs(L1 - L2)) ** 2
    if den == 0.0:
        return meas.copy()

    new_meas = np.empty(4)
    for i, P in enumerate((exp[0:2], exp[2:4])):
        u = ((P[0] - L1[0]) + (L2[0] - L1[0]) + (P[1] - L1[1]) + (L2[1] - L1[1])) / den
        new_meas[2 * i:2 * i + 2] = L1 + u * (L2 - L1)
    return new_meas

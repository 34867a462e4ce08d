from setuptools import setup, find_packages

setup(
    name="segslam",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "numpy",
        "opencv-python",
        "scipy",
        "PyYAML",
    ],
    extras_require={
        "test": ["pytest"],
    },
    author="Nitin Thakkar",
    author_email="thakkarnitin1998@gmail.com",
    description="Line segment matching and detection front-end for segment-based visual SLAM",
    python_requires=">=3.8",
)

'''
Contains all of the test code to make sure the code in `SATVIEW` is running properly.
Directory structure mirrors that of SATVIEW, with additional data directories.

All test/test_XXXX modules contains unit testing code for SATVIEW/XXXX.
Test/Example simulation definitions are in SATVIEW/Examples/Simulations
Test/Example attitude traces are in SATVIEW/Examples/Traces
'''

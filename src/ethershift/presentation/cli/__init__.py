"""Line-oriented console front end."""

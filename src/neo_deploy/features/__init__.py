"""Feature packages of the deployment control plane."""

"""HTTP surface for the workspace synchronizer and analyzer."""

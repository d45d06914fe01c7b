cur_version = "v1"
acp_prefix = f"/acp/{cur_version}"
ucp_prefix = f"/ucp/{cur_version}"
